"""Validate that the service is configured and can reach its dependencies."""

import asyncio
import sys

import httpx
from pydantic import ValidationError

from bayangida.config import Settings
from bayangida.state.manager import StateManager


async def check_python_version() -> bool:
    """Check if Python version is 3.10+."""
    print("Checking Python version...")

    version = sys.version_info
    if version < (3, 10):
        print(f"  ❌ Python {version.major}.{version.minor} detected")
        print("  → Python 3.10+ required")
        return False

    print(f"  ✓ Python {version.major}.{version.minor} detected")
    return True


async def check_settings() -> bool:
    """Check that environment settings parse."""
    print("\nChecking configuration...")

    try:
        settings = Settings()
    except ValidationError as e:
        print(f"  ❌ Invalid settings: {e}")
        return False

    print(f"  ✓ Environment: {settings.environment}")
    print(f"  ✓ Redis: {settings.redis_url} (prefix '{settings.redis_key_prefix}')")
    return True


async def check_redis() -> bool:
    """Check that Redis answers."""
    print("\nChecking Redis...")

    state_manager = StateManager()
    try:
        await state_manager.ping()
    except Exception as e:
        print(f"  ❌ Redis not reachable: {e}")
        print("  → Start Redis or set REDIS_URL")
        return False
    finally:
        await state_manager.disconnect()

    print("  ✓ Redis is reachable")
    return True


async def check_api() -> bool:
    """Check the API health endpoint if the server is running."""
    print("\nChecking API...")

    try:
        async with httpx.AsyncClient() as client:
            response = await client.get("http://localhost:8000/health", timeout=5.0)
    except httpx.HTTPError:
        print("  ℹ️  API not running (run 'python -m bayangida.main')")
        return True  # Not a failure, just not started yet

    if response.status_code != 200:
        print(f"  ⚠️  API returned status {response.status_code}")
        return False

    print("  ✓ API is responding")
    return True


async def main() -> None:
    """Run all validation checks."""
    print("\n" + "=" * 60)
    print("  Bayangida Order Operations - Setup Validation")
    print("=" * 60 + "\n")

    checks = [
        ("Python Version", check_python_version),
        ("Configuration", check_settings),
        ("Redis", check_redis),
        ("API", check_api),
    ]

    results = []
    for name, check in checks:
        results.append((name, await check()))

    print("\n" + "=" * 60)
    print("  Validation Summary")
    print("=" * 60)

    for name, passed in results:
        print(f"  {'✓' if passed else '❌'} {name}")

    print("=" * 60)

    if all(passed for _, passed in results):
        print("\n✅ All checks passed! Service is ready.")
        print("\nNext steps:")
        print("  1. Seed data: python scripts/seed_data.py")
        print("  2. Start API: python -m bayangida.main")
        print("  3. View docs: http://localhost:8000/docs")
    else:
        print("\n❌ Some checks failed. Please fix the issues above.")
        sys.exit(1)

    print()


if __name__ == "__main__":
    asyncio.run(main())
