#!/usr/bin/env python3
"""
Initialize the dispatch tracker.

This script sets up the project by:
- Checking the Python version
- Checking for the .env file and store settings
- Validating the business configuration file
- Creating the data and upload directories
- Initializing the SQLite store (when selected)
"""

import os
import sys
from pathlib import Path

import yaml
from dotenv import load_dotenv


def check_python_version() -> bool:
    """Verify Python version is 3.11 or higher."""
    if sys.version_info < (3, 11):
        print(f"❌ Python 3.11+ required. Current version: {sys.version}")
        return False
    print(f"✅ Python version: {sys.version_info.major}.{sys.version_info.minor}")
    return True


def check_env_file() -> bool:
    """Check if .env file exists."""
    env_path = Path(".env")
    if not env_path.exists():
        print("❌ .env file not found")
        print("   Run: cp .env.example .env")
        return False
    print("✅ .env file exists")
    return True


def load_and_validate_env() -> bool:
    """Load environment variables and check the store settings."""
    load_dotenv()

    backend = (os.getenv("STORE_BACKEND") or "memory").lower()
    if backend not in ("memory", "sqlite"):
        print(f"❌ STORE_BACKEND must be 'memory' or 'sqlite', got '{backend}'")
        return False
    print(f"✅ Store backend: {backend}")

    if backend == "memory":
        print("⚠️  Memory backend selected: data is lost when the process exits")

    optional_missing = [var for var in ("HAULIX_APP_ID", "UPLOAD_DIR") if not os.getenv(var)]
    if optional_missing:
        print(f"⚠️  Optional variables not set (defaults apply): {', '.join(optional_missing)}")

    return True


def check_config_files() -> bool:
    """Validate the business configuration file."""
    path = Path("config/config.yaml")
    if not path.exists():
        print("❌ Main configuration not found: config/config.yaml")
        return False
    print("✅ Main configuration exists")

    try:
        with open(path) as f:
            config = yaml.safe_load(f)
    except yaml.YAMLError as e:
        print(f"❌ Error parsing config.yaml: {e}")
        return False
    if not config:
        print("❌ config.yaml is empty")
        return False

    variant = (config.get("billing") or {}).get("variant", "cost_tracking")
    if variant not in ("cost_tracking", "pricing_only"):
        print(f"❌ billing.variant must be cost_tracking or pricing_only, got '{variant}'")
        return False
    print(f"✅ config.yaml is valid (billing variant: {variant})")
    return True


def create_data_directories() -> bool:
    """Create data and upload directories."""
    directories = [
        Path(os.getenv("STORE_PATH") or "./data/haulix_store.db").parent,
        Path(os.getenv("UPLOAD_DIR") or "./uploads"),
    ]

    for directory in directories:
        directory.mkdir(parents=True, exist_ok=True)

    print(f"✅ Created {len(directories)} data directories")
    return True


def initialize_store() -> bool:
    """Create the SQLite schema when the sqlite backend is selected."""
    if (os.getenv("STORE_BACKEND") or "memory").lower() != "sqlite":
        print("✅ No persistent store to initialize")
        return True

    from haulix.store.sqlite import SqliteDocumentStore

    store_path = os.getenv("STORE_PATH") or "./data/haulix_store.db"
    store = SqliteDocumentStore(store_path)
    store.close()
    print(f"✅ SQLite store ready: {store_path}")
    return True


def display_next_steps():
    """Show user what to do next."""
    print("\n" + "=" * 60)
    print("🎉 Project initialization complete!")
    print("=" * 60)
    print("\nNext steps:")
    print("\n1. Review config/config.yaml (company defaults, billing variant)")
    print("2. Run the demo:")
    print("   haulix-demo")
    print("3. Run the tests:")
    print("   pytest")
    print("\n" + "=" * 60)


def main():
    """Run all initialization checks."""
    print("=" * 60)
    print("Haulix Dispatch - Initialization")
    print("=" * 60)
    print()

    checks = [
        ("Python version", check_python_version),
        (".env file", check_env_file),
        ("Environment variables", load_and_validate_env),
        ("Configuration files", check_config_files),
        ("Data directories", create_data_directories),
        ("Store", initialize_store),
    ]

    passed = 0
    failed = 0

    for name, check_func in checks:
        print(f"\nChecking {name}...")
        if check_func():
            passed += 1
        else:
            failed += 1

    print("\n" + "=" * 60)
    print(f"Results: {passed} passed, {failed} failed")
    print("=" * 60)

    if failed == 0:
        display_next_steps()
        return 0
    else:
        print("\n❌ Some checks failed. Please fix the issues above.")
        return 1


if __name__ == "__main__":
    sys.exit(main())
