"""CLI entrypoint for decision-tree workflows.

Commands:
- decode: show what a fingerprint means
- inspect: show the stored state of a workflow
- run: instantiate a workflow (once per event) and optionally invoke entries
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from collections.abc import Sequence
from typing import Any

from pydantic import ValidationError

from decision_tree import __version__
from decision_tree.core.config import DecisionTreeConfig
from decision_tree.registry import UnknownWorkflowError, WorkflowRegistry
from decision_tree.stores import StoreError, create_store_factory
from decision_tree.workflow import FINISH_CALL, UnknownNodeError, Workflow, codec

logger = logging.getLogger(__name__)


def _parse_inputs(values: Sequence[str] | None) -> dict[str, Any]:
    inputs: dict[str, Any] = {}
    for item in values or []:
        key, sep, raw = item.partition("=")
        if not sep or not key.strip():
            raise ValueError(f"Expected KEY=VALUE, got {item!r}")
        try:
            inputs[key.strip()] = json.loads(raw)
        except json.JSONDecodeError:
            inputs[key.strip()] = raw
    return inputs


def _describe(fingerprint: str | None) -> dict[str, object]:
    entries, calls = codec.decode(fingerprint)
    return {
        "fingerprint": fingerprint or "",
        "entry_points": list(entries),
        "calls": sorted(calls),
        "finished": FINISH_CALL in calls,
    }


def _describe_workflow(workflow: Workflow) -> dict[str, object]:
    payload = _describe(workflow.fingerprint)
    payload["steps"] = [step.model_dump(mode="json") for step in workflow.steps]
    return payload


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="decision-tree",
        description="Resumable decision-tree workflows",
    )
    parser.add_argument("--version", action="version", version=f"decision-tree {__version__}")

    subparsers = parser.add_subparsers(dest="command", required=True)

    decode = subparsers.add_parser("decode", help="Decode a workflow fingerprint")
    decode.add_argument("fingerprint", help="Fingerprint, e.g. 'approve:finish!/notify'")

    inspect = subparsers.add_parser("inspect", help="Show the stored state of a workflow")
    inspect.add_argument("--workflow-id", required=True, help="Workflow identity in the store")

    run = subparsers.add_parser(
        "run",
        help="Instantiate a workflow against its store and optionally invoke entry points",
    )
    run.add_argument(
        "workflow",
        help="Registered workflow name or import path 'package.module:ClassName'",
    )
    run.add_argument("--workflow-id", required=True, help="Workflow identity in the store")
    run.add_argument(
        "--entry",
        action="append",
        default=[],
        help="Entry point to invoke after instantiation (repeatable)",
    )
    run.add_argument(
        "--input",
        action="append",
        default=[],
        help="Workflow input as KEY=VALUE; VALUE is parsed as JSON when possible (repeatable)",
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        config = DecisionTreeConfig()
    except ValidationError as e:
        # Logging isn't configured yet; keep it simple and actionable.
        print("Configuration error (check your .env):", file=sys.stderr)
        print(e, file=sys.stderr)
        return 2

    config.setup_logging()

    try:
        if args.command == "decode":
            print(json.dumps(_describe(args.fingerprint), indent=2))
            return 0

        if args.command == "inspect":
            store = create_store_factory(config).open(args.workflow_id)
            payload = _describe(store.load_fingerprint())
            payload["steps"] = [step.model_dump(mode="json") for step in store.load_steps()]
            print(json.dumps(payload, indent=2))
            return 0

        if args.command == "run":
            registry = WorkflowRegistry()
            for path in config.workflow_paths():
                registry.load(path)
            cls = registry.resolve(args.workflow)
            inputs = _parse_inputs(args.input)

            store = create_store_factory(config).open(args.workflow_id)

            def instantiate_and_enter() -> Workflow:
                workflow = cls(store, **inputs)
                for entry in args.entry:
                    workflow.enter(entry)
                return workflow

            # Instantiation and every entry form a single unit of work.
            workflow = store.run_exclusive(instantiate_and_enter)

            logger.info(
                "Workflow run complete",
                extra={"workflow_id": args.workflow_id, "fingerprint": workflow.fingerprint},
            )
            print(json.dumps(_describe_workflow(workflow), indent=2))
            return 0

        logger.error("Unknown command", extra={"command": args.command})
        return 2

    except (UnknownWorkflowError, UnknownNodeError, ValueError) as e:
        print(str(e), file=sys.stderr)
        return 2

    except StoreError as e:
        logger.error(str(e))
        print(str(e), file=sys.stderr)
        return 1

    except Exception:
        logger.exception("Command failed")
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
