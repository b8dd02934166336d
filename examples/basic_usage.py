"""
prompt-composer 基本用法示例

展示如何使用PromptComposer构建结构化提示词、估算token数量并生成LLM消息。
"""

import json
import sys
from pathlib import Path
import dotenv

# 加载.env文件中的环境变量
dotenv.load_dotenv()

# 添加父目录到Python路径，以便直接运行示例
sys.path.insert(0, str(Path(__file__).parent.parent))

from prompt_composer import PromptComposer, PromptComposerError


PROMPT_TEMPLATE = (
    "Task: {{task_name}}\n\n"
    "Context: {{context}}\n\n"
    "User question: {{user_query}}\n\n"
    "{{dvao}}"
)


def basic_usage_example():
    """基本用法示例"""
    print("=" * 60)
    print("prompt-composer 基本用法示例")
    print("=" * 60)

    has_specific_rules = True
    examples = [
        {"query": "This is great", "response": '{ "sentiment": "positive" }'},
        {"query": "I am disappointed", "response": '{ "sentiment": "negative" }'},
    ]

    # 1. 配置组合器（启用结构化模式）
    print("\n1. 配置组合器...")
    composer = (
        PromptComposer(PROMPT_TEMPLATE, structured=True)
        .add_argument("task_name", "Sentiment analysis as JSON")
        .with_arguments({
            "context": "The user is a customer reviewing a product.",
            "user_query": "Customer service was slow, but the product is high quality.",
        })
        .add_section_if(has_specific_rules, "critical_rules", "The answer MUST be a single valid JSON object.")
        .add_examples(examples)
        .add_default("If the sentiment is mixed, prioritize the strongest aspect.")
        .add_default_if(True, "Include a confidence score when available.")
    )

    # 2. 构建最终提示词
    print("\n2. 最终提示词:\n")
    print(composer.build())

    # 3. 估算token数量
    print(f"\n3. token估算: {composer.estimate_tokens()} tokens")

    # 4. 生成LLM消息
    print("\n4. LLM消息:\n")
    print(json.dumps(composer.build_for_llm(), indent=2, ensure_ascii=False))


def validation_error_example():
    """校验错误示例"""
    print("\n" + "=" * 60)
    print("占位符校验错误示例")
    print("=" * 60)

    try:
        PromptComposer("Task: {{task_name}}").build()
    except PromptComposerError as e:
        print(f"   捕获错误: {e}")


if __name__ == "__main__":
    basic_usage_example()
    validation_error_example()
