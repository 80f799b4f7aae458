#!/usr/bin/env python3
"""
MindOrbit CLI

Command-line interface for the mind map layout engine.

Usage:
    mindorbit layout <tree.json|tree.yaml> [options]
    mindorbit presets
"""

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import List, Optional

import yaml


def _configure_logging(verbose: bool):
    logging.basicConfig(
        stream=sys.stderr,
        level=logging.DEBUG if verbose else logging.WARNING,
        format='%(asctime)s %(levelname)s %(name)s: %(message)s',
    )


def _dump(data, fmt: str) -> str:
    if fmt == 'yaml':
        return yaml.safe_dump(data, sort_keys=False)
    return json.dumps(data, indent=2)


def cmd_layout(args):
    """Compute a layout and write it as JSON or YAML."""
    from .layout.config import get_preset, load_config
    from .layout.engine import compute_layout
    from .output.shapes import to_render_document
    from .tree.abstraction import MalformedTreeError
    from .tree.loader import load_tree_document

    try:
        root, cross_links = load_tree_document(args.tree)
    except FileNotFoundError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    except MalformedTreeError as e:
        print(f"Error: Malformed tree: {e}", file=sys.stderr)
        return 1

    try:
        if args.config:
            config = load_config(args.config)
        else:
            config = get_preset(args.preset)
    except (FileNotFoundError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    route = True if args.route else None
    try:
        result = compute_layout(root, strategy=args.strategy, config=config,
                                cross_links=cross_links, route_edges=route)
    except MalformedTreeError as e:
        print(f"Error: Malformed tree: {e}", file=sys.stderr)
        return 1

    data = to_render_document(result) if args.render else result.to_dict()
    text = _dump(data, args.format)

    if args.output:
        Path(args.output).write_text(text, encoding='utf-8')
        print(f"Layout written to {args.output}: {len(result)} nodes, "
              f"{len(result.edges)} edges", file=sys.stderr)
    else:
        sys.stdout.write(text)
        if not text.endswith('\n'):
            sys.stdout.write('\n')

    if not result.converged:
        print(f"Warning: simulation did not converge (max force {result.max_force:.3f})",
              file=sys.stderr)
    return 0


def cmd_presets(args):
    """List layout presets."""
    from .layout.config import get_preset, list_presets

    for name in list_presets():
        preset = get_preset(name)
        radii = ", ".join(f"{r:.0f}" for r in preset.radial.ring_radii)
        print(f"  {name:<10} rings=[{radii}] margin={preset.collision.margin:.0f}")
    return 0


def main(argv: Optional[List[str]] = None):
    """Main entry point."""
    parser = argparse.ArgumentParser(
        description="MindOrbit - Radial Orbital Mind Map Layout",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  mindorbit layout tree.json
  mindorbit layout tree.yaml --strategy force -o layout.json
  mindorbit layout tree.json --preset compact --format yaml
  mindorbit layout tree.json --config layout.yaml --render
        """,
    )

    parser.add_argument('--version', action='version', version='mindorbit 0.1.0')

    subparsers = parser.add_subparsers(dest='command', help='Available commands')

    # Layout command
    layout_parser = subparsers.add_parser('layout', help='Compute node positions')
    layout_parser.add_argument('tree', help='Path to a JSON or YAML content tree')
    layout_parser.add_argument('--strategy', choices=['radial', 'force'], default='radial',
                               help='Layout engine (default: radial)')
    layout_parser.add_argument('--preset', default='default',
                               help='Config preset (default: default)')
    layout_parser.add_argument('-c', '--config', help='YAML config file (overrides --preset)')
    layout_parser.add_argument('-o', '--output', help='Output file path (default: stdout)')
    layout_parser.add_argument('--format', choices=['json', 'yaml'], default='json',
                               help='Output format (default: json)')
    layout_parser.add_argument('--route', action='store_true',
                               help='Route edges around nodes for the radial strategy too')
    layout_parser.add_argument('--render', action='store_true',
                               help='Emit renderer shapes and connectors instead of raw positions')
    layout_parser.add_argument('-v', '--verbose', action='store_true', help='Verbose output')

    # Presets command
    subparsers.add_parser('presets', help='List layout presets')

    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 1

    _configure_logging(getattr(args, 'verbose', False))

    # Dispatch command
    commands = {
        'layout': cmd_layout,
        'presets': cmd_presets,
    }

    return commands[args.command](args)


if __name__ == '__main__':
    sys.exit(main())
