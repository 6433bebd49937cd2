"""
命令行入口

用法：
    mdpress render --config render.yaml
    mdpress dashboard --source output --output output/files-dashboard.html --format both
    mdpress hydrate --template exam.html --data exams.json --output output/exams
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from .config import get_config, load_jobs, reload_config
from .dashboard import build_catalog
from .interfaces import ConfigError
from .pipeline import RenderExecutor, TemplateHydrator

logger = logging.getLogger(__name__)


def setup_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def cmd_render(args: argparse.Namespace) -> int:
    jobs = load_jobs(args.config)
    results = RenderExecutor().run(jobs)

    failed = [r for r in results if not r.ok]
    for r in results:
        for flag in r.flags:
            logger.warning(f"[{r.job.describe()}] {flag}")
    logger.info(f"任务 {len(results)} 个，失败 {len(failed)} 个")
    return 1 if failed else 0


def cmd_dashboard(args: argparse.Namespace) -> int:
    config = get_config().dashboard
    written = build_catalog(
        source=Path(args.source or config.source),
        output=Path(args.output or config.output),
        fmt=args.format or config.format,
        use_remote=config.use_remote and not args.no_remote,
    )
    for path in written:
        print(path)
    return 0


def cmd_hydrate(args: argparse.Namespace) -> int:
    report = TemplateHydrator().hydrate(
        template_path=Path(args.template),
        data_path=Path(args.data),
        output_dir=Path(args.output),
        images_dir=Path(args.images) if args.images else None,
    )
    for name, error in report.failures.items():
        logger.error(f"{name}: {error}")
    return 0 if report.ok else 1


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="mdpress",
        description="Markdown/HTML 文档组装并输出 PDF，生成产物目录",
    )
    parser.add_argument("--runtime-config", help="运行期配置 YAML（默认 mdpress.yaml）")
    sub = parser.add_subparsers(dest="command", required=True)

    p_render = sub.add_parser("render", help="按任务配置渲染 PDF")
    p_render.add_argument(
        "--config",
        default="render.yaml",
        help="任务配置文件路径或内联 YAML（默认 render.yaml）",
    )
    p_render.set_defaults(func=cmd_render)

    p_dash = sub.add_parser("dashboard", help="生成产物目录")
    p_dash.add_argument("--source", help="扫描目录（默认 output）")
    p_dash.add_argument("--output", help="目录文件路径（默认 output/files-dashboard.html）")
    p_dash.add_argument("--format", choices=["html", "markdown", "both"], help="输出格式")
    p_dash.add_argument("--no-remote", action="store_true", help="不使用远程仓库地址")
    p_dash.set_defaults(func=cmd_dashboard)

    p_hyd = sub.add_parser("hydrate", help="模板 + JSON 数据批量生成 PDF")
    p_hyd.add_argument("--template", required=True, help=".html 或 .md 模板")
    p_hyd.add_argument("--data", required=True, help="JSON 数据文件（名称 -> 数据）")
    p_hyd.add_argument("--output", required=True, help="PDF 输出目录")
    p_hyd.add_argument("--images", help="图片解析基准目录（默认模板所在目录）")
    p_hyd.set_defaults(func=cmd_hydrate)

    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)

    config = reload_config(args.runtime_config) if args.runtime_config else get_config()
    setup_logging(config.logging.log_level)

    try:
        return args.func(args)
    except ConfigError as e:
        logger.error(f"配置错误: {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
