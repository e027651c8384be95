#!/usr/bin/env python3
"""Drive order process instances from the command line.

The engine is chosen with --engine or ORDER_FLOW_ENGINE (default: camunda),
the Camunda REST root with --url or CAMUNDA_REST_URL. Only demo uses the
in-memory engine, since its instances are gone when the process exits.

Usage examples:
    # Start the order process for business key 42
    uv run scripts/order_cli.py --engine camunda start 42

    # Mark it paid, then show where it is
    uv run scripts/order_cli.py --engine camunda send 42 pay
    uv run scripts/order_cli.py --engine camunda status 42

    # List Payment links currently offered
    uv run scripts/order_cli.py --engine camunda links 42 Payment

    # Walk a sample order through the in-memory engine
    uv run scripts/order_cli.py demo
"""

import argparse
import dataclasses
import logging
import sys

from order_flow import OrderService, WorkflowSettings, create_workflow_client
from order_flow.application import AffordanceDiscovery, CorrelationBridge, StatusProjector
from order_flow.domain import LineItem, Money, OrderMessage, WorkflowError

TRANSITIONS: dict[str, OrderMessage] = {
    "pay": OrderMessage.PAYMENT,
    "prepare": OrderMessage.START_PREPARATION,
    "ready": OrderMessage.PREPARED,
    "take": OrderMessage.TAKEN,
}


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Start, advance and inspect order process instances",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=f"Transitions: {', '.join(TRANSITIONS)}",
    )
    parser.add_argument(
        "--engine", default=None,
        help="Workflow engine (default: $ORDER_FLOW_ENGINE or camunda). "
             "memory only works with demo",
    )
    parser.add_argument("--url", default=None, help="Camunda REST root URL")
    parser.add_argument(
        "--process-key", default=None,
        help="Process definition key (default: order)",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")

    sub = parser.add_subparsers(dest="command", required=True)

    start = sub.add_parser("start", help="Start a process instance")
    start.add_argument("business_key")

    send = sub.add_parser("send", help="Correlate a lifecycle message")
    send.add_argument("business_key")
    send.add_argument("transition", choices=sorted(TRANSITIONS))

    status = sub.add_parser("status", help="Show the current activity")
    status.add_argument("business_key")

    links = sub.add_parser("links", help="List links offered for a resource type")
    links.add_argument("business_key")
    links.add_argument("resource_type")

    sub.add_parser("demo", help="Walk a sample order through the in-memory engine")
    return parser.parse_args(argv)


def load_settings(args: argparse.Namespace) -> WorkflowSettings:
    settings = WorkflowSettings.from_env()
    overrides = {}
    if args.engine:
        overrides["engine"] = args.engine.lower()
    if args.url:
        overrides["base_url"] = args.url
    if args.process_key:
        overrides["process_key"] = args.process_key
    return dataclasses.replace(settings, **overrides)


def run_demo() -> int:
    service = OrderService(create_workflow_client("memory"))
    order = service.place_order([
        LineItem("Cappuchino", Money.of("2.50")),
        LineItem("Java Chip", Money.of("1.20")),
    ])
    print(f"Placed order {order.id} ({order.price})")
    print(f"  {'placed':20s} -> {service.status(order)}")

    steps = [
        ("paid", service.mark_paid),
        ("in preparation", service.mark_in_preparation),
        ("prepared", service.mark_prepared),
        ("taken", service.mark_taken),
    ]
    for label, command in steps:
        command(order)
        print(f"  {label:20s} -> {service.status(order)}")
    return 0


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if args.command == "demo":
        return run_demo()

    settings = load_settings(args)
    if settings.engine == "memory":
        print(
            "Error: the memory engine does not outlive a single run; "
            "use --engine camunda, or the demo command",
            file=sys.stderr,
        )
        return 1
    try:
        workflow = create_workflow_client(settings.engine, **settings.client_kwargs())
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    try:
        if args.command == "start":
            bridge = CorrelationBridge(workflow, settings.process_key)
            instance_id = bridge.start(args.business_key)
            print(f"Started instance {instance_id} for {args.business_key}")
        elif args.command == "send":
            message = TRANSITIONS[args.transition]
            CorrelationBridge(workflow, settings.process_key).correlate(
                args.business_key, message,
            )
            print(f"Sent {message.value} to {args.business_key}")
        elif args.command == "status":
            print(StatusProjector(workflow).status(args.business_key))
        elif args.command == "links":
            found = AffordanceDiscovery(workflow).available_links(
                args.business_key, args.resource_type,
            )
            for link in found:
                print(link)
    except WorkflowError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    finally:
        workflow.close()
    return 0


if __name__ == "__main__":
    sys.exit(main())
