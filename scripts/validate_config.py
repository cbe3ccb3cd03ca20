#!/usr/bin/env python
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from config.config_loader import ConfigLoader, ConfigValidator, DEFAULT_TABLES_PATH
from utils.logger import setup_logger

logger = setup_logger(__name__)


def validate_configuration(config_path: Path) -> bool:
    print("\n" + "=" * 80)
    print(" Bunamo Pairing Tables Validator")
    print("=" * 80 + "\n")

    try:
        print(f"[INFO] Loading pairing tables from {config_path}...")
        config = ConfigLoader(config_path=config_path).load()

        print("[INFO] Running validation checks...")
        errors = ConfigValidator.validate(config)

        if errors:
            print(f"\n[ERROR] Validation failed with {len(errors)} error(s):\n")
            for error in errors:
                print(f"  - {error}")
            print()
            return False

        print("[INFO] All validation checks passed\n")

        print("Tables Summary:")
        print("-" * 80)
        print(f"  Flavor entries:     {len(config['flavor_compatibility'])}")
        print(f"  Origins:            {', '.join(sorted(config['origin_affinity']))}")
        print(f"  Dark roast textures: {len(config['roast_textures']['dark'])}")
        print(f"  Light roast textures: {len(config['roast_textures']['light'])}")
        print(f"  Seasons:            {', '.join(sorted(config['seasonal_factors']))}")
        print(f"  Popularity keys:    {sorted(config['popularity_factors'])}")
        print("-" * 80 + "\n")

        return True

    except Exception as e:
        print(f"\n[ERROR] Failed to validate pairing tables: {str(e)}\n")
        logger.error("Pairing table validation failed", exc_info=True)
        return False


if __name__ == "__main__":
    path = Path(sys.argv[1]) if len(sys.argv) > 1 else DEFAULT_TABLES_PATH
    success = validate_configuration(path)
    sys.exit(0 if success else 1)
