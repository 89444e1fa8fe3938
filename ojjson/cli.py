from __future__ import annotations

import argparse
import asyncio
import importlib
import json
import logging
import os
import sys
from typing import List, Optional, Type

from pydantic import BaseModel

from .adapters import ChatAdapter, OllamaAdapter, OpenAIAdapter
from .exceptions import ExhaustionError, TransportError
from .generator import OjjsonGenerator
from .settings import GeneratorOptions
from .shapes import DESCRIBE_MODES

logger = logging.getLogger(__name__)

BACKENDS = ("ollama", "openai")


def load_model(path: str) -> Type[BaseModel]:
    """Import a pydantic model from ``package.module:ClassName``."""
    module_name, sep, attr = path.partition(":")
    if not sep or not module_name or not attr:
        raise ValueError(f"Expected 'module:ClassName', got '{path}'")
    module = importlib.import_module(module_name)
    model = getattr(module, attr, None)
    if not (isinstance(model, type) and issubclass(model, BaseModel)):
        raise ValueError(f"'{path}' is not a pydantic model")
    return model


def build_adapter(args: argparse.Namespace) -> ChatAdapter:
    if args.backend == "openai":
        kwargs = {"base_url": args.base_url} if args.base_url else {}
        return OpenAIAdapter(args.model, **kwargs)
    return OllamaAdapter(args.model, host=args.base_url or os.getenv("OLLAMA_HOST"))


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="ojjson",
        description="Turn a JSON input into a schema-conforming JSON output using a chat model.",
    )
    parser.add_argument("--input-model", required=True, help="Input schema as module:ClassName")
    parser.add_argument("--output-model", required=True, help="Output schema as module:ClassName")
    parser.add_argument(
        "--backend",
        choices=BACKENDS,
        default=os.getenv("OJJSON_BACKEND", "ollama"),
        help="Chat backend (defaults to OJJSON_BACKEND or ollama)",
    )
    parser.add_argument(
        "--model",
        default=os.getenv("OJJSON_MODEL", "llama3.1"),
        help="Model id (defaults to OJJSON_MODEL or llama3.1)",
    )
    parser.add_argument("--base-url", help="Ollama host or OpenAI-compatible base URL")
    parser.add_argument("--input", dest="input_json", help="Input JSON (read from stdin when omitted)")
    parser.add_argument("--conversion-help", help="Free-text hint on how to map input to output")
    parser.add_argument("--describe-mode", choices=DESCRIBE_MODES, default="example")
    parser.add_argument("--retries", type=int, default=2)
    parser.add_argument("--fix-tries", type=int, default=1)
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING)

    try:
        input_schema = load_model(args.input_model)
        output_schema = load_model(args.output_model)
    except (ImportError, ValueError) as exc:
        parser.error(str(exc))

    raw = args.input_json if args.input_json is not None else sys.stdin.read()
    try:
        payload = input_schema.model_validate_json(raw)
    except ValueError as exc:
        parser.error(f"Input does not match {input_schema.__name__}: {exc}")

    generator = OjjsonGenerator(
        build_adapter(args),
        input_schema,
        output_schema,
        GeneratorOptions(
            conversion_help=args.conversion_help,
            verbose=args.verbose,
            describe_mode=args.describe_mode,
        ),
    )

    try:
        output = asyncio.run(generator.generate(payload, retries=args.retries, fix_tries=args.fix_tries))
    except ExhaustionError as exc:
        logger.error("%s", exc)
        print(f"error: {exc}", file=sys.stderr)
        print(json.dumps(exc.to_json(), ensure_ascii=False), file=sys.stderr)
        return 1
    except TransportError as exc:
        logger.error("%s", exc)
        print(f"error: {exc}", file=sys.stderr)
        return 1

    print(json.dumps(output.model_dump(mode="json", by_alias=True), indent=2, ensure_ascii=False))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
