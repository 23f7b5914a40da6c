#!/usr/bin/env python3
"""
Centralized sync commands for the NFL cache

Usage examples:
    python sync_commands.py teams
    python sync_commands.py schedule --season 2024
    python sync_commands.py roster --team 33405046-04ee-4058-a950-d606f8c30852
    python sync_commands.py stats --game 56779053-89da-4939-bc22-9b3f6e0e7ba3
    python sync_commands.py week-stats --week 3 --season 2024
"""

import asyncio
import argparse
import sys
from gridiron.config import settings
from gridiron.database import get_db, create_tables
from gridiron.services.cache_store import NFLCacheStore
from gridiron.services.nfl_data_service import NFLDataService
from gridiron.utils.seasons import get_current_season

class SyncCommands:
    def __init__(self):
        self.db = None
        self.service = None

    async def _setup(self):
        """Initialize database connection and service"""
        create_tables()
        self.db = next(get_db())
        self.service = NFLDataService(self.db)

    async def _cleanup(self):
        """Clean up connections"""
        if self.service:
            await self.service.close()
        if self.db:
            self.db.close()

    async def sync_teams(self):
        print("🏈 Syncing NFL teams...")
        data = await self.service.sync_teams()
        count = sum(
            len(division.get('teams') or [])
            for conference in data.get('conferences') or []
            for division in conference.get('divisions') or []
        )
        print(f"✅ Cached {count} teams")
        return count

    async def sync_schedule(self, season: int = None, season_type: str = None):
        season = season or get_current_season()
        season_type = season_type or settings.default_season_type

        print(f"📅 Syncing {season} {season_type} schedule...")
        data = await self.service.sync_season_schedule(season, season_type)
        count = sum(len(week.get('games') or []) for week in data.get('weeks') or [])
        print(f"✅ Cached {count} games")
        return count

    async def sync_roster(self, team_id: str):
        print(f"👥 Syncing roster for team {team_id}...")
        data = await self.service.sync_team_roster(team_id)
        count = len(data.get('players') or [])
        print(f"✅ Cached {count} players")
        return count

    async def sync_game_stats(self, game_id: str):
        print(f"📊 Syncing statistics for game {game_id}...")
        data = await self.service.sync_game_statistics(game_id)
        statistics = data.get('statistics') or {}
        count = sum(len((statistics.get(side) or {}).get('players') or []) for side in ('home', 'away'))
        print(f"✅ Cached {count} player stat lines")
        return count

    async def sync_week_stats(self, week: int, season: int = None, season_type: str = None):
        """Sync statistics for every cached game of a week"""
        season = season or get_current_season()
        season_type = season_type or settings.default_season_type
        games = NFLCacheStore(self.db).list_week_games(season, week, season_type)
        if not games:
            print(f"⚠️  No cached games for {season} {season_type} week {week}; run the schedule sync first")
            return 0

        total = 0
        for game in games:
            try:
                total += await self.sync_game_stats(game.id)
            except Exception as e:
                print(f"❌ Error syncing game {game.id}: {e}")

        print(f"\n🎉 Week {week} sync complete! Total stat lines cached: {total}")
        return total

async def main():
    parser = argparse.ArgumentParser(description='Sync Sportradar NFL data into the local cache')
    parser.add_argument('command', choices=['teams', 'schedule', 'roster', 'stats', 'week-stats'],
                       help='What to sync')
    parser.add_argument('--season', '-s', type=int,
                       help='NFL season (default: current season)')
    parser.add_argument('--season-type', '-t', type=str,
                       help=f'Season type (default: {settings.default_season_type})')
    parser.add_argument('--week', '-w', type=int,
                       help='NFL week number (required for week-stats)')
    parser.add_argument('--team', type=str,
                       help='Sportradar team ID (required for roster)')
    parser.add_argument('--game', '-g', type=str,
                       help='Sportradar game ID (required for stats)')

    args = parser.parse_args()

    # Validation
    if args.command == 'roster' and not args.team:
        parser.error("--team is required for roster")
    if args.command == 'stats' and not args.game:
        parser.error("--game is required for stats")
    if args.command == 'week-stats' and not args.week:
        parser.error("--week is required for week-stats")

    sync = SyncCommands()

    try:
        await sync._setup()

        if args.command == 'teams':
            await sync.sync_teams()
        elif args.command == 'schedule':
            await sync.sync_schedule(args.season, args.season_type)
        elif args.command == 'roster':
            await sync.sync_roster(args.team)
        elif args.command == 'stats':
            await sync.sync_game_stats(args.game)
        elif args.command == 'week-stats':
            await sync.sync_week_stats(args.week, args.season, args.season_type)

    except KeyboardInterrupt:
        print("\n⏹️  Sync cancelled by user")
    except Exception as e:
        print(f"❌ Sync failed: {e}")
        sys.exit(1)
    finally:
        await sync._cleanup()

if __name__ == "__main__":
    asyncio.run(main())
