#!/usr/bin/env python
import argparse
import asyncio
import json
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from models import CoffeeItem, PastryItem
from services.pairing_service import PairingService

DEFAULT_MENU = Path(__file__).resolve().parent.parent / "data" / "sample_menu.json"


def parse_args():
    parser = argparse.ArgumentParser(description="Rank pastries for a coffee from a JSON menu file")
    parser.add_argument("coffee", help="Coffee id or name")
    parser.add_argument("--menu", type=Path, default=DEFAULT_MENU, help="Menu JSON with 'coffees' and 'pastries'")
    parser.add_argument("--top-k", type=int, default=3)
    parser.add_argument("--enhance", action="store_true", help="Ask the narrative service for marketing copy")
    return parser.parse_args()


def main():
    args = parse_args()

    with open(args.menu, "r") as f:
        menu = json.load(f)

    coffees = [CoffeeItem.model_validate(c) for c in menu.get("coffees", [])]
    pastries = [PastryItem.model_validate(p) for p in menu.get("pastries", [])]

    wanted = args.coffee.strip().lower()
    anchor = next((c for c in coffees if wanted in ((c.id or "").lower(), c.name.lower())), None)
    if anchor is None:
        print(f"Coffee not found: {args.coffee}")
        sys.exit(1)

    response = asyncio.run(PairingService().generate_pairings(anchor, pastries, top_k=args.top_k, enhance=args.enhance))

    print(f"\nPairings for {anchor.name} ({response.ui.layout.value})")
    print("-" * 80)
    if not response.pairs:
        print(f"  {response.ui.notes}")
    for rank, pair in enumerate(response.pairs, start=1):
        print(f"  {rank}. {pair.pastry.name:<30} {pair.score:.3f}  [{pair.narrative_source.value}]")
        print(f"     {pair.why_marketing}")
        print(f"     {pair.engine_explanation}")
    print("-" * 80 + "\n")


if __name__ == "__main__":
    main()
