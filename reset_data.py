"""
reset_data.py
-------------
Utility script to clear all stored data (vehicles, suppliers, bookings,
favorites, ratings) from the local data.pkl file.

This script is designed for development and testing purposes.

Usage:
    $ python reset_data.py

After running this script, you can repopulate sample data by executing:
    $ python seeds.py
"""

from motorent import config
from motorent.models.store import MemoryStore


def main():
    """Clear every collection and save the empty store back to DATA_PATH."""
    if not config.DATA_PATH:
        print("DATA_PATH is empty; nothing to reset.")
        return

    store = MemoryStore(config.DATA_PATH)
    store.clear()

    print(f"✅ All data cleared from {store.path}")


if __name__ == "__main__":
    main()
