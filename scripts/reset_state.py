"""Delete every key under the configured prefix (useful for testing)."""

import asyncio

from bayangida.state.manager import StateManager


async def reset_all_state() -> None:
    """Clear all service data from Redis."""
    state_manager = StateManager()

    print(f"\n⚠️  WARNING: This will delete ALL '{state_manager.prefix}:*' keys from Redis!")
    response = input("Are you sure? (yes/no): ")

    if response.lower() != "yes":
        print("Cancelled.")
        return

    print("\nResetting state...")

    await state_manager.connect()
    try:
        keys = await state_manager.scan_keys(state_manager.key("*"))
        if keys:
            await state_manager.delete(*keys)
    finally:
        await state_manager.disconnect()

    print(f"✓ Removed {len(keys)} keys\n")


if __name__ == "__main__":
    asyncio.run(reset_all_state())
