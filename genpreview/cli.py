"""CLI entrypoints for genpreview commands."""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path

from .config import ConfigError, PreviewConfig, load_config
from .logging import configure_logging, excerpt, get_logger
from .pages import assemble_pages, project_overview_document
from .recovery import MalformedDocumentError, RecoveryError, recover, render_project

logger = get_logger("cli")


def _add_verbose_option(
    parser: argparse.ArgumentParser, *, suppress_default: bool = False
) -> None:
    kwargs: dict[str, object] = {
        "action": "store_true",
        "help": "Increase log verbosity for troubleshooting.",
    }
    if suppress_default:
        kwargs["default"] = argparse.SUPPRESS
    else:
        kwargs["default"] = False
    parser.add_argument(
        "-v",
        "--verbose",
        **kwargs,
    )


def _add_input_argument(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "file",
        help="File holding raw model output (use '-' to read standard input).",
    )


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="genpreview",
        description="Recover generated projects and render static page previews.",
    )
    _add_verbose_option(parser)
    parser.add_argument(
        "--config",
        default=None,
        help="Path to a .genpreview.yml file or its directory (defaults to current directory).",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    recover_parser = subparsers.add_parser(
        "recover",
        help="Repair model output and print the recovered project.",
    )
    _add_verbose_option(recover_parser, suppress_default=True)
    _add_input_argument(recover_parser)
    recover_parser.add_argument(
        "--json",
        action="store_true",
        help="Print the normalised project envelope instead of a file summary.",
    )

    pages_parser = subparsers.add_parser(
        "pages",
        help="Render a static preview document for every page route.",
    )
    _add_verbose_option(pages_parser, suppress_default=True)
    _add_input_argument(pages_parser)
    pages_parser.add_argument(
        "--out-dir",
        required=True,
        help="Directory receiving <slug>.html files and pages.json.",
    )
    pages_parser.add_argument(
        "--workers",
        type=int,
        default=None,
        help="Extract pages on this many threads.",
    )

    serve_parser = subparsers.add_parser(
        "serve",
        help="Run the HTTP service.",
    )
    _add_verbose_option(serve_parser, suppress_default=True)
    serve_parser.add_argument("--host", default="127.0.0.1", help="Interface to bind.")
    serve_parser.add_argument("--port", type=int, default=8000, help="Port to listen on.")

    return parser


def _read_input(path: str) -> str:
    if path == "-":
        return sys.stdin.read()
    return Path(path).read_text(encoding="utf-8")


def _run_recover(args: argparse.Namespace) -> None:
    project = recover(_read_input(args.file))
    if args.json:
        print(render_project(project))
        return
    print(f"{project.name} ({project.kind.value}, {len(project.files)} files)")
    for entry in project.files:
        print(f"  {entry.path} [{entry.inferred_kind.value}]")


def _run_pages(args: argparse.Namespace, config: PreviewConfig) -> None:
    project = recover(_read_input(args.file))
    pages = assemble_pages(project, settings=config, workers=args.workers)
    out_dir = Path(args.out_dir)
    out_dir.mkdir(parents=True, exist_ok=True)

    index = []
    for page in pages:
        (out_dir / f"{page.slug}.html").write_text(page.html_document, encoding="utf-8")
        index.append(
            {
                "slug": page.slug,
                "title": page.title,
                "order": page.order,
                "is_homepage": page.is_homepage,
                "source_path": page.source_path,
                "used_fallback": page.used_fallback,
                "description": page.description,
                "meta_title": page.meta_title,
            }
        )
    if not pages:
        (out_dir / "overview.html").write_text(
            project_overview_document(project, settings=config), encoding="utf-8"
        )
    (out_dir / "pages.json").write_text(
        json.dumps({"project": project.name, "pages": index}, indent=2, sort_keys=True),
        encoding="utf-8",
    )
    if pages:
        print(f"Wrote {len(pages)} pages to {_relativize(out_dir)}")
    else:
        print(f"No static pages found; wrote project overview to {_relativize(out_dir)}")


def main(argv: list[str] | None = None) -> None:
    """CLI entrypoint for genpreview commands."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    configure_logging(verbose=bool(args.verbose))

    try:
        config = load_config(Path(args.config) if args.config else Path.cwd())
    except ConfigError as exc:
        parser.exit(1, f"{exc}\n")

    if args.command == "recover":
        try:
            _run_recover(args)
        except FileNotFoundError as exc:
            parser.exit(1, f"{exc}\n")
        except MalformedDocumentError as exc:
            logger.debug("Context around failure: %r", excerpt(exc.context_snippet, 120))
            parser.exit(1, f"genpreview recover failed: {exc}\nRun with --verbose for more details.\n")
        except RecoveryError as exc:
            parser.exit(1, f"genpreview recover failed: {exc}\n")
    elif args.command == "pages":
        try:
            _run_pages(args, config)
        except FileNotFoundError as exc:
            parser.exit(1, f"{exc}\n")
        except RecoveryError as exc:
            parser.exit(1, f"genpreview pages failed: {exc}\n")
    elif args.command == "serve":  # pragma: no cover - integration path
        from .service import run_service

        run_service(host=args.host, port=args.port)
    else:  # pragma: no cover - argparse enforces choices
        parser.exit(1, "Unknown command\n")


def _relativize(path: Path) -> str:
    try:
        return str(path.resolve().relative_to(Path.cwd()))
    except ValueError:
        return str(path)


if __name__ == "__main__":
    main(sys.argv[1:])
