#!/usr/bin/env python3
"""Resumable onboarding workflow example.

This demonstrates driving a workflow once per incoming event:

* load settings from `.env` (store backend, logging)
* instantiate the workflow against its store, which resumes it
* invoke an entry point when an event arrives

Run it several times with the same `--workflow-id`: the welcome message is
only sent once, and the workflow finishes once valid documents arrive.
"""

from __future__ import annotations

import argparse
from typing import Sequence

from decision_tree import Signal, TraversalContext, TreeBuilder, Workflow
from decision_tree.core.config import DecisionTreeConfig
from decision_tree.stores import create_store_factory


def _send_welcome(ctx: TraversalContext) -> None:
    print(f"Welcome, {ctx.inputs['name']}! Please upload your documents.")


def _wait_for_documents(ctx: TraversalContext) -> Signal:
    ctx.call_once("send_welcome", lambda: _send_welcome(ctx))
    return ctx.stop()


def _request_resubmission(ctx: TraversalContext) -> None:
    print(f"{ctx.inputs['name']}, your documents were rejected. Please upload them again.")


class Onboarding(Workflow):
    def is_adult(self) -> bool:
        return self.inputs["age"] >= 18

    def documents_received(self) -> None:
        print("Documents received, validating...")

    def documents_valid(self) -> bool:
        return self.inputs.get("valid", False)

    @classmethod
    def define(cls, tree: TreeBuilder) -> None:
        tree.start(lambda ctx: ctx.decide("is_adult"))
        tree.decision("is_adult", yes=_wait_for_documents, no=lambda ctx: ctx.finish())
        tree.entry("documents_received", lambda ctx: ctx.decide("documents_valid"))
        tree.decision(
            "documents_valid",
            yes=lambda ctx: ctx.finish(),
            no=lambda ctx: ctx.call_once(
                "request_resubmission", lambda: _request_resubmission(ctx)
            ),
        )


def _parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Drive an onboarding workflow (example).")
    parser.add_argument("--workflow-id", required=True, help="Workflow identity in the store")
    parser.add_argument("--name", default="Ada", help="Applicant name")
    parser.add_argument("--age", type=int, default=30, help="Applicant age")
    parser.add_argument(
        "--documents",
        choices=["none", "valid", "invalid"],
        default="none",
        help="Simulate a documents-received event",
    )
    return parser.parse_args(argv)


def main(argv: Sequence[str] | None = None) -> int:
    args = _parse_args(argv)

    config = DecisionTreeConfig()
    config.setup_logging()

    store = create_store_factory(config).open(args.workflow_id)
    workflow = Onboarding(
        store, name=args.name, age=args.age, valid=args.documents == "valid"
    )
    if args.documents != "none":
        workflow.enter("documents_received")

    print(f"Fingerprint: {workflow.fingerprint}")
    print(f"Finished: {workflow.finished}")
    for step in workflow.steps:
        print(f"  {step}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
