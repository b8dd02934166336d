#!/usr/bin/env python3
"""
运行演示脚本

运行prompt-composer的演示和测试。
"""

import sys
import os
import argparse
from pathlib import Path

# 添加项目根目录到Python路径
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))


def run_basic_demo():
    """运行基本演示"""
    print("运行基本用法演示...")
    from examples.basic_usage import basic_usage_example, validation_error_example
    basic_usage_example()
    validation_error_example()


def run_cli_demo():
    """通过命令行渲染示例模板"""
    print("运行命令行演示...")
    from prompt_composer.cli import main as cli_main
    return cli_main([
        "messages",
        "examples/templates/sentiment.txt",
        "--structured",
        "--context",
        "examples/sentiment_context.yaml",
    ]) == 0


def run_specific_test(test_path):
    """运行特定测试"""
    print(f"运行测试: {test_path}")
    import pytest
    exit_code = pytest.main([test_path, "-v"])
    return exit_code == 0


def list_demos():
    """列出所有演示"""
    print("可用的演示:")
    print("1. basic     - 基本用法演示 (examples/basic_usage.py)")
    print("2. cli       - 命令行渲染示例模板")
    print("3. tests     - 运行所有测试")
    print("4. test-unit - 运行单元测试")
    print("5. test-integration - 运行集成测试")


def main():
    """主函数"""
    parser = argparse.ArgumentParser(description="运行prompt-composer演示和测试")
    parser.add_argument(
        "demo",
        nargs="?",
        default="list",
        help="要运行的演示名称 (basic, cli, tests, test-unit, test-integration)",
    )
    parser.add_argument(
        "--test",
        help="运行特定测试文件",
    )

    args = parser.parse_args()

    # 确保在项目根目录
    os.chdir(project_root)

    if args.test:
        success = run_specific_test(args.test)
        sys.exit(0 if success else 1)

    demo_map = {
        "basic": run_basic_demo,
        "cli": run_cli_demo,
        "tests": lambda: run_specific_test("tests"),
        "test-unit": lambda: run_specific_test("tests/unit"),
        "test-integration": lambda: run_specific_test("tests/integration"),
    }

    if args.demo == "list":
        list_demos()
    elif args.demo in demo_map:
        try:
            result = demo_map[args.demo]()
        except KeyboardInterrupt:
            print("\n演示被用户中断")
            sys.exit(1)
        if result is False:
            sys.exit(1)
    else:
        print(f"未知的演示: {args.demo}")
        list_demos()
        sys.exit(1)


if __name__ == "__main__":
    main()
