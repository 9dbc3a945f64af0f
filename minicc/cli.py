"""
minicc 命令行
=============
用法: python -m minicc prog.mc [--ast] [--symbols] [-v]

退出码: 0 分析通过，1 有语义错误，2 语法错误或文件无法读取。
"""

import argparse
import logging
import sys

from .pipeline import MiniFrontend
from .tree.printer import format_tree

EXIT_OK       = 0
EXIT_SEMANTIC = 1
EXIT_PARSE    = 2


def build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='minicc', description='解析并检查 mini 语言程序')
    parser.add_argument('file', help='源文件')
    parser.add_argument('--ast', action='store_true', help='输出语法树')
    parser.add_argument('--symbols', action='store_true',
                        help='分析结束后输出顶层符号表')
    parser.add_argument('-v', '--verbose', action='store_true', help='输出调试日志')
    return parser


def main(argv=None) -> int:
    args = build_arg_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format='%(levelname)s %(name)s: %(message)s',
    )

    result = MiniFrontend().process_file(args.file)

    if result.error:
        print(f"error: {result.error}", file=sys.stderr)
        return EXIT_PARSE
    if result.parse_error is not None:
        print(result.parse_error)
        return EXIT_PARSE

    if args.ast:
        print(format_tree(result.ast))
        print()

    print(result.diags.report())
    if args.symbols and result.symbol_table is not None:
        print()
        print(result.symbol_table.dump())

    if result.verdict:
        print("Semantic analysis successful. No errors found.")
        return EXIT_OK
    print("Semantic analysis failed. Errors detected.")
    return EXIT_SEMANTIC


if __name__ == "__main__":
    sys.exit(main())
