#!/usr/bin/env python3
"""
Database setup script for the NFL Fantasy & Pick'em API
Run this to create the tables and, optionally, prime the team cache from Sportradar
"""

import argparse
import asyncio
import sys
import os
sys.path.append(os.path.join(os.path.dirname(__file__), '..', 'backend'))

from gridiron.database import SessionLocal, create_tables
from gridiron.models.players import NFLTeam
from gridiron.services.nfl_data_service import NFLDataService

def create_database():
    """Create database tables"""
    create_tables()
    print("✅ Database tables created successfully")

async def populate_teams():
    """Prime the team cache so schedule lookups can show team names"""
    db = SessionLocal()
    service = NFLDataService(db)

    try:
        existing_teams = db.query(NFLTeam).count()
        if existing_teams > 0:
            print("📊 Team cache already populated, skipping")
            return

        await service.sync_teams()
        print(f"✅ Cached {db.query(NFLTeam).count()} NFL teams")

    except Exception as e:
        print(f"❌ Error populating team cache: {e}")
        raise
    finally:
        await service.close()
        db.close()

def main():
    """Main setup function"""
    parser = argparse.ArgumentParser(description='Set up the NFL Fantasy & Pick\'em database')
    parser.add_argument('--with-teams', action='store_true',
                        help='Fetch the league hierarchy and cache all teams (needs SPORTRADAR_API_KEY)')
    args = parser.parse_args()

    print("🏈 Setting up NFL Fantasy & Pick'em Database...")

    try:
        create_database()
        if args.with_teams:
            asyncio.run(populate_teams())
        print("\n🎉 Database setup completed successfully!")
        print("\nNext steps:")
        print("1. Copy .env.example to .env and set SPORTRADAR_API_KEY and JWT_SECRET")
        print("2. Run: cd backend && uvicorn gridiron.main:app --reload")
        print("3. Visit: http://localhost:8000/docs for API documentation")

    except Exception as e:
        print(f"\n❌ Setup failed: {e}")
        sys.exit(1)

if __name__ == "__main__":
    main()
