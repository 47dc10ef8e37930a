'''
This file contains the database configuration for the Stay Calendar service.
'''
from typing import Optional
from supabase import create_client, Client

from config import Config


class StayDB:
    """Database Client"""

    # private interface
    def __init__(self, url: Optional[str] = None, key: Optional[str] = None):
        url = url or Config.SUPABASE_URL
        key = key or Config.SUPABASE_KEY
        if url is None or key is None:
            raise ValueError("Database URL or Key not found in environment variables.")
        self.url: str = url
        self.key: str = key
        self.client: Client = create_client(url, key)


if __name__ == "__main__":
    db_conn = StayDB()

    _ = db_conn.client.table(Config.BOOKINGS_TABLE).select("*").execute()
    print(_)
