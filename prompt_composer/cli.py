import argparse
import json
import sys
from typing import Any, Dict, List, Optional, Sequence

import dotenv
import yaml

from prompt_composer.config.config_manager import get_config_manager
from prompt_composer.prompts import PromptComposer, PromptComposerError, TemplateValidator
from prompt_composer.utils.logger import setup_logger

dotenv.load_dotenv()


def _split_pair(raw: str, option: str) -> List[str]:
    if "=" not in raw:
        raise ValueError(f"{option} 需要 KEY=VALUE 格式: {raw}")
    key, value = raw.split("=", 1)
    return [key.strip(), value]


def _load_context(path: Optional[str]) -> Dict[str, Any]:
    if not path:
        return {}
    with open(path, "r", encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}
    if not isinstance(data, dict):
        raise ValueError(f"上下文文件必须是映射结构: {path}")
    return data


def _load_examples(entries: Any) -> List[Dict[str, str]]:
    if not isinstance(entries, list):
        raise ValueError("上下文文件中的 examples 必须是列表")
    examples = []
    for index, entry in enumerate(entries):
        if not isinstance(entry, dict) or "query" not in entry or "response" not in entry:
            raise ValueError(f"examples[{index}] 需要包含 query 和 response 字段")
        examples.append({"query": str(entry["query"]), "response": str(entry["response"])})
    return examples


def _create_composer(args: argparse.Namespace) -> PromptComposer:
    config = get_config_manager()
    structured = args.structured or bool(config.get("composer.structured", False))
    composer = PromptComposer.from_file(
        args.template,
        structured=structured,
        encoding=config.get("composer.encoding", "utf-8"),
    )

    context = _load_context(args.context)
    composer.with_arguments({k: str(v) for k, v in (context.get("arguments") or {}).items()})
    for tag, content in (context.get("sections") or {}).items():
        composer.add_section(tag, str(content))
    composer.add_defaults(str(value) for value in context.get("defaults") or [])
    if context.get("examples"):
        composer.add_examples(_load_examples(context["examples"]))

    for raw in args.arg:
        key, value = _split_pair(raw, "--arg")
        composer.add_argument(key, value)
    for raw in args.section:
        tag, content = _split_pair(raw, "--section")
        composer.add_section(tag, content)
    composer.add_defaults(args.default)
    return composer


def _build(args: argparse.Namespace) -> int:
    composer = _create_composer(args)
    print(composer.build())
    return 0


def _messages(args: argparse.Namespace) -> int:
    composer = _create_composer(args)
    user_key = args.user_key or get_config_manager().get("composer.user_query_key", "user_query")
    messages = composer.build_for_llm(user_key)
    print(json.dumps(messages, indent=2, ensure_ascii=False))
    return 0


def _tokens(args: argparse.Namespace) -> int:
    composer = _create_composer(args)
    chars_per_token = args.chars_per_token
    if chars_per_token is None:
        chars_per_token = get_config_manager().get("composer.chars_per_token", 4)
    print(composer.estimate_tokens(chars_per_token))
    return 0


def _check(args: argparse.Namespace) -> int:
    composer = _create_composer(args)
    populated = [tag for tag, content in composer.sections.items() if content]
    result = TemplateValidator().validate(composer.template, composer.arguments, populated)
    print(result)
    return 0 if result.is_valid else 1


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = argparse.ArgumentParser(prog="prompt-composer")
    subparsers = parser.add_subparsers(dest="cmd", required=True)
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument("template", help="提示词模板文件")
    common.add_argument("--structured", action="store_true", help="自动追加结构化段落占位符")
    common.add_argument("--arg", action="append", default=[], metavar="KEY=VALUE")
    common.add_argument("--section", action="append", default=[], metavar="TAG=CONTENT")
    common.add_argument("--default", action="append", default=[], metavar="TEXT")
    common.add_argument("--context", help="YAML/JSON上下文文件（arguments/sections/defaults/examples）")
    common.add_argument("--config", help="配置文件路径")
    common.add_argument("--log-level", default=None)

    p_build = subparsers.add_parser("build", parents=[common])
    p_build.set_defaults(func=_build)

    p_messages = subparsers.add_parser("messages", parents=[common])
    p_messages.add_argument("--user-key", default=None)
    p_messages.set_defaults(func=_messages)

    p_tokens = subparsers.add_parser("tokens", parents=[common])
    p_tokens.add_argument("--chars-per-token", type=int, default=None)
    p_tokens.set_defaults(func=_tokens)

    p_check = subparsers.add_parser("check", parents=[common])
    p_check.set_defaults(func=_check)

    args = parser.parse_args(argv)
    config = get_config_manager(args.config, reload=True)
    setup_logger(level=args.log_level)
    problems = config.validate()
    if problems:
        for problem in problems:
            print(f"配置错误: {problem}", file=sys.stderr)
        return 1

    try:
        return args.func(args)
    except (PromptComposerError, ValueError, OSError, yaml.YAMLError) as e:
        print(f"错误: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
