#!/usr/bin/env python3
"""Rebuild the image and roll it out to a local cluster with Helm.

Usage:
  python scripts/redeploy.py --cluster minikube
  python scripts/redeploy.py --cluster kind --greeting "Hi World."
  python scripts/redeploy.py --cluster none --image registry.example.com/hello --pull-always

Steps: docker build, load the image into the cluster, helm upgrade --install,
and a rollout restart so a rebuilt image under a reused tag is picked up.
"""
from __future__ import annotations

import argparse
import shlex
import subprocess
import sys
from dataclasses import dataclass
from typing import Callable, Sequence

CLUSTERS = ("kind", "minikube", "none")
CHART_NAME = "hello-world"


@dataclass
class Step:
    name: str
    argv: list[str]

    def __str__(self) -> str:
        return shlex.join(self.argv)


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Rebuild and redeploy the hello-world service")
    parser.add_argument("--image", default="hello-world-app")
    parser.add_argument("--tag", default="latest")
    parser.add_argument("--release", default="hello-world")
    parser.add_argument("--chart", default="chart/hello-world")
    parser.add_argument("--namespace", default=None)
    parser.add_argument("--context", default=".", help="docker build context")
    parser.add_argument("--cluster", choices=CLUSTERS, default="minikube")
    parser.add_argument("--greeting", default=None, help="override the chart's greeting value")
    parser.add_argument(
        "--pull-always",
        action="store_true",
        help="set image.pullPolicy=Always (registry images only, requires --cluster none)",
    )
    parser.add_argument("--dry-run", action="store_true", help="print the commands only")
    args = parser.parse_args(argv)

    # A loaded image lives only in the node cache; Always would make the kubelet
    # pull it from a registry that does not have it.
    if args.pull_always and args.cluster != "none":
        parser.error(f"--pull-always cannot be combined with --cluster {args.cluster}")
    return args


def escape_set_value(value: str) -> str:
    """Escape a value for helm --set/--set-string, which splits on commas."""
    return value.replace("\\", "\\\\").replace(",", "\\,")


def deployment_name(release: str, chart_name: str = CHART_NAME) -> str:
    """Mirror the chart's "hello-world.fullname" helper."""
    if chart_name in release:
        name = release
    else:
        name = f"{release}-{chart_name}"
    return name[:63].rstrip("-")


def plan(args: argparse.Namespace) -> list[Step]:
    image_ref = f"{args.image}:{args.tag}"
    steps = [Step("build", ["docker", "build", "-t", image_ref, args.context])]

    if args.cluster == "kind":
        steps.append(Step("load", ["kind", "load", "docker-image", image_ref]))
    elif args.cluster == "minikube":
        steps.append(Step("load", ["minikube", "image", "load", image_ref]))

    helm = [
        "helm", "upgrade", "--install", args.release, args.chart,
        "--set", f"image.repository={escape_set_value(args.image)}",
        "--set", f"image.tag={escape_set_value(args.tag)}",
    ]
    if args.pull_always:
        helm += ["--set", "image.pullPolicy=Always"]
    if args.greeting is not None:
        helm += ["--set-string", f"greeting={escape_set_value(args.greeting)}"]
    if args.namespace:
        helm += ["--namespace", args.namespace, "--create-namespace"]
    steps.append(Step("deploy", helm))

    # A rebuilt image under a reused tag leaves the pod template unchanged,
    # so helm alone would keep the old pods running.
    restart = ["kubectl", "rollout", "restart", f"deployment/{deployment_name(args.release)}"]
    if args.namespace:
        restart += ["--namespace", args.namespace]
    steps.append(Step("restart", restart))

    return steps


def execute(
    steps: Sequence[Step],
    runner: Callable[[list[str]], int] | None = None,
    dry_run: bool = False,
) -> int:
    """Run steps in order; stop at the first failure and return its code."""
    if runner is None:
        runner = lambda argv: subprocess.call(argv)  # noqa: E731

    for step in steps:
        print(f"[{step.name}] {step}")
        if dry_run:
            continue
        try:
            code = runner(step.argv)
        except FileNotFoundError:
            print(f"[{step.name}] command not found: {step.argv[0]}", file=sys.stderr)
            return 127
        if code != 0:
            print(f"[{step.name}] failed with exit code {code}", file=sys.stderr)
            return code
    return 0


def main(argv: list[str] | None = None, runner: Callable[[list[str]], int] | None = None) -> None:
    args = parse_args(argv)
    code = execute(plan(args), runner=runner, dry_run=args.dry_run)
    if code:
        raise SystemExit(code)


if __name__ == "__main__":
    main()
