"""
命令行接口测试
"""

import json

import pytest
import yaml

from prompt_composer.cli import main


@pytest.fixture
def template_file(tmp_path):
    path = tmp_path / "hello.txt"
    path.write_text("Hello, {{name}}!", encoding="utf-8")
    return str(path)


def _run(capsys, *argv):
    code = main(list(argv) + ["--log-level", "CRITICAL"])
    captured = capsys.readouterr()
    return code, captured.out, captured.err


class TestCLI:
    """命令行测试"""

    def test_build(self, capsys, template_file):
        """测试构建提示词"""
        code, out, _ = _run(capsys, "build", template_file, "--arg", "name=World")
        assert code == 0
        assert out == "Hello, World!\n"

    def test_build_value_with_equals_sign(self, capsys, template_file):
        """测试参数值中包含等号"""
        code, out, _ = _run(capsys, "build", template_file, "--arg", "name=a=b")
        assert code == 0
        assert out == "Hello, a=b!\n"

    def test_build_missing_argument(self, capsys, template_file):
        """测试缺少参数时返回错误码"""
        code, _, err = _run(capsys, "build", template_file)
        assert code == 1
        assert "{{name}}" in err

    def test_bad_argument_format(self, capsys, template_file):
        """测试参数格式错误"""
        code, _, err = _run(capsys, "build", template_file, "--arg", "nameWorld")
        assert code == 1
        assert "KEY=VALUE" in err

    def test_unknown_section(self, capsys, template_file):
        """测试未知段落标签"""
        code, _, err = _run(capsys, "build", template_file, "--arg", "name=x", "--section", "bogus=y")
        assert code == 1
        assert "bogus" in err

    def test_missing_template(self, capsys, tmp_path):
        """测试模板文件不存在"""
        code, _, err = _run(capsys, "build", str(tmp_path / "nope.txt"))
        assert code == 1
        assert "nope.txt" in err

    def test_structured_with_sections_and_defaults(self, capsys, tmp_path):
        """测试结构化模式、段落和默认值"""
        path = tmp_path / "task.txt"
        path.write_text("Task: {{task}}\n{{dvao}}", encoding="utf-8")
        code, out, _ = _run(
            capsys,
            "build", str(path),
            "--structured",
            "--arg", "task=Summarize",
            "--section", "critical_rules=Be concise.",
            "--default", "English",
        )
        assert code == 0
        assert out.startswith("Task: Summarize\n<default_values_and_overrides>")
        assert "<critical_rules>Be concise.</critical_rules>" in out
        assert "{{" not in out

    def test_messages(self, capsys, tmp_path):
        """测试输出LLM消息"""
        path = tmp_path / "system.txt"
        path.write_text("Topic: {{topic}}", encoding="utf-8")
        code, out, _ = _run(capsys, "messages", str(path), "--arg", "topic=weather", "--arg", "user_query=Hi")
        assert code == 0
        assert json.loads(out) == [
            {"role": "system", "content": "Topic: weather"},
            {"role": "user", "content": "Hi"},
        ]

    def test_messages_custom_key(self, capsys, tmp_path):
        """测试自定义用户消息键"""
        path = tmp_path / "system.txt"
        path.write_text("System", encoding="utf-8")
        code, out, _ = _run(capsys, "messages", str(path), "--arg", "q=Hi", "--user-key", "q")
        assert code == 0
        assert json.loads(out)[1] == {"role": "user", "content": "Hi"}

    def test_messages_missing_user(self, capsys, tmp_path):
        """测试缺少用户消息"""
        path = tmp_path / "system.txt"
        path.write_text("System", encoding="utf-8")
        code, _, err = _run(capsys, "messages", str(path))
        assert code == 1
        assert "user_query" in err

    def test_tokens(self, capsys, template_file):
        """测试token估算"""
        code, out, _ = _run(capsys, "tokens", template_file, "--arg", "name=World")
        assert code == 0
        assert out.strip() == "4"

        code, out, _ = _run(capsys, "tokens", template_file, "--arg", "name=World", "--chars-per-token", "1")
        assert out.strip() == "13"

    def test_check(self, capsys, template_file):
        """测试模板检查"""
        code, out, _ = _run(capsys, "check", template_file)
        assert code == 1
        assert "{{name}}" in out

        code, out, _ = _run(capsys, "check", template_file, "--arg", "name=x")
        assert code == 0
        assert "通过" in out

    def test_context_file(self, capsys, tmp_path):
        """测试从上下文文件读取参数、段落、默认值和示例"""
        path = tmp_path / "task.txt"
        path.write_text("Task: {{task}}{{examples}}{{dvao}}", encoding="utf-8")
        context_path = tmp_path / "context.yaml"
        context_path.write_text(yaml.safe_dump({
            "arguments": {"task": "Classify", "count": 3},
            "sections": {"examples": "Examples: "},
            "defaults": ["Use English"],
            "examples": [{"query": "Q", "response": "R"}],
        }), encoding="utf-8")

        code, out, _ = _run(capsys, "build", str(path), "--context", str(context_path))
        assert code == 0
        assert out.startswith("Task: Classify<examples>Examples: <example>")
        assert "<user_query>Q</user_query>" in out
        assert "Use English" in out

    def test_tokens_zero_chars_per_token(self, capsys, template_file):
        """测试 --chars-per-token 0 返回错误而不是除零异常"""
        code, out, err = _run(capsys, "tokens", template_file, "--arg", "name=World", "--chars-per-token", "0")
        assert code == 1
        assert out == ""
        assert "chars_per_token" in err

    def test_invalid_config_from_env(self, capsys, monkeypatch, template_file):
        """测试环境变量给出非正数的 chars_per_token 时启动即失败"""
        monkeypatch.setenv("PROMPT_COMPOSER_CHARS_PER_TOKEN", "0")
        code, out, err = _run(capsys, "tokens", template_file, "--arg", "name=World")
        assert code == 1
        assert out == ""
        assert "composer.chars_per_token" in err

    def test_invalid_config_file(self, capsys, tmp_path, template_file):
        """测试配置文件中的非法取值在启动时被拒绝"""
        config_path = tmp_path / "config.yaml"
        config_path.write_text(yaml.safe_dump({"composer": {"chars_per_token": -1}}), encoding="utf-8")
        code, _, err = _run(capsys, "build", template_file, "--arg", "name=World", "--config", str(config_path))
        assert code == 1
        assert "composer.chars_per_token" in err

    def test_context_example_missing_response(self, capsys, tmp_path):
        """测试上下文文件中的示例缺少字段"""
        path = tmp_path / "task.txt"
        path.write_text("Task{{examples}}", encoding="utf-8")
        context_path = tmp_path / "context.yaml"
        context_path.write_text(yaml.safe_dump({"examples": [{"query": "Q"}]}), encoding="utf-8")

        code, _, err = _run(capsys, "build", str(path), "--context", str(context_path))
        assert code == 1
        assert "examples[0]" in err
        assert "response" in err

    def test_context_examples_not_a_list(self, capsys, tmp_path):
        """测试上下文文件中的 examples 不是列表"""
        path = tmp_path / "task.txt"
        path.write_text("Task{{examples}}", encoding="utf-8")
        context_path = tmp_path / "context.yaml"
        context_path.write_text(yaml.safe_dump({"examples": {"query": "Q", "response": "R"}}), encoding="utf-8")

        code, _, err = _run(capsys, "build", str(path), "--context", str(context_path))
        assert code == 1
        assert "examples" in err
