#!/usr/bin/env python3
"""
Command-line interface for the Index Cluster Harness
Provides commands for bringing up a throwaway cluster and finding free ports.
"""
import sys
import json
import time
import yaml
import argparse
import logging
import traceback
from typing import Any, Dict, List
from .config import load_harness_config
from .errors import HarnessError
from .models import HarnessConfig
from .cluster_orchestrator import Cluster, ClusterOrchestrator, PortAllocator


class HarnessCLI:
    """Command-line interface for the Index Cluster Harness"""

    def load_harness_config(self, args) -> HarnessConfig:
        """Build harness settings from --config, then apply command-line overrides"""
        config = load_harness_config(args.config) if args.config else HarnessConfig()
        if getattr(args, 'binary', None):
            config.server_binary = args.binary
        if getattr(args, 'log_dir', None):
            config.log_dir = args.log_dir
        return config

    def bring_up(self, args) -> int:
        """Start a cluster, print its membership and keep it up until interrupted"""
        self._print_header(f"Index Cluster ({args.size} nodes)")

        try:
            harness_config = self.load_harness_config(args)
        except (OSError, ValueError, yaml.YAMLError) as e:
            print(f"Error: Failed to load config file: {e}")
            print(f"\nConfig file must be YAML (.yaml, .yml) or JSON (.json)")
            return 1

        try:
            cluster = ClusterOrchestrator(harness_config).new_cluster(args.size)
        except HarnessError as e:
            print(f"Error: {e}")
            if args.verbose:
                traceback.print_exc()
            return 1

        close_failed = False
        try:
            self._print_membership(cluster, args.format)
            if not args.no_wait:
                print("\nCluster is up. Press Ctrl+C to tear it down.")
                self._wait_for_interrupt()
        finally:
            print("\nTearing down cluster")
            try:
                cluster.close()
            except HarnessError as e:
                print(f"Error: {e}")
                close_failed = True
        return 1 if close_failed else 0

    def find_ports(self, args) -> int:
        allocator = PortAllocator()
        try:
            for _ in range(args.count):
                print(allocator.find_free_port())
        except HarnessError as e:
            print(f"Error: {e}")
            return 1
        return 0

    def _wait_for_interrupt(self) -> None:
        try:
            while True:
                time.sleep(1)
        except KeyboardInterrupt:
            pass

    def _print_header(self, title: str):
        """Print formatted header"""
        print()
        print("=" * 80)
        print(title)
        print("=" * 80)
        print()

    def _membership(self, cluster: Cluster) -> List[Dict[str, Any]]:
        return [{'node': i + 1, **config.to_dict()} for i, config in enumerate(cluster.configs)]

    def _print_membership(self, cluster: Cluster, format: str) -> None:
        membership = self._membership(cluster)
        if format == 'json':
            print(json.dumps({'hosts': cluster.hosts, 'nodes': membership}, indent=2))
        elif format == 'yaml':
            print(yaml.safe_dump({'hosts': cluster.hosts, 'nodes': membership}, default_flow_style=False))
        else:
            for node in membership:
                print(f"Node {node['node']}: bind={node['bind']} gossip={node['gossip_port']} "
                      f"seed={node['gossip_seed']} data={node['data_dir']}")


def create_parser() -> argparse.ArgumentParser:
    """Create argument parser for CLI"""
    parser = argparse.ArgumentParser(
        prog='cluster-harness',
        description='Index Cluster Harness - Bring up throwaway gossip clusters of index servers',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Bring up a 3-node cluster and keep it running until Ctrl+C
  cluster-harness up --size 3

  # Use settings from a file and a specific server binary
  cluster-harness up --size 2 --config harness.yaml --binary /usr/local/bin/pilosa

  # Print two free ports
  cluster-harness find-port --count 2
        """
    )

    parser.add_argument(
        '--version',
        action='version',
        version='Index Cluster Harness 0.1.0'
    )

    subparsers = parser.add_subparsers(dest='command', help='Command to execute')

    up_parser = subparsers.add_parser(
        'up',
        help='Start a cluster and keep it running until interrupted'
    )
    up_parser.add_argument(
        '--size',
        type=int,
        default=3,
        help='Number of nodes (default: 3)'
    )
    up_parser.add_argument(
        '--config',
        type=str,
        help='Path to harness configuration file (YAML or JSON)'
    )
    up_parser.add_argument(
        '--binary',
        type=str,
        metavar='PATH',
        help='Index server binary to launch'
    )
    up_parser.add_argument(
        '--log-dir',
        type=str,
        help='Directory for per-node server output'
    )
    up_parser.add_argument(
        '--format',
        choices=['text', 'json', 'yaml'],
        default='text',
        help='Output format for cluster membership (default: text)'
    )
    up_parser.add_argument(
        '--no-wait',
        action='store_true',
        help='Tear the cluster down right after it is up'
    )
    up_parser.add_argument(
        '--verbose',
        action='store_true',
        help='Enable verbose output'
    )

    port_parser = subparsers.add_parser(
        'find-port',
        help='Print momentarily-free TCP ports'
    )
    port_parser.add_argument(
        '--count',
        type=int,
        default=1,
        help='Number of ports to print (default: 1)'
    )

    return parser


def main(argv=None):
    """Main entry point for CLI"""

    logging.basicConfig(
        level=logging.INFO,
        format='%(levelname)-5s | %(filename)s:%(lineno)-3d | %(message)s',
        handlers=[logging.StreamHandler()],
        force=True
    )

    parser = create_parser()
    args = parser.parse_args(argv)

    if not args.command:
        print("Error: No command specified\n")
        parser.print_help()
        return 1

    if args.command == 'up' and args.size < 0:
        print("Error: --size must be non-negative")
        return 1

    cli = HarnessCLI()

    try:
        if args.command == 'up':
            return cli.bring_up(args)
        elif args.command == 'find-port':
            return cli.find_ports(args)
    except KeyboardInterrupt:
        print("\n\nInterrupted by user")
        return 130

    return 0


if __name__ == '__main__':
    sys.exit(main())
