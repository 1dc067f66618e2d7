#!/usr/bin/env python3

"""
Session Manager - Numbered scan sessions and their folder layout.
"""

import json
import logging
import shutil
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, Optional, Tuple, Union

logger = logging.getLogger(__name__)

SESSION_SUBDIRS = ("raw_data", "analysis", "reports")


class SessionManager:
    """Manages scan numbering, folder layout and the per-scan summary."""

    def __init__(self, data_dir: Union[str, Path] = "data"):
        """Initialize the session manager rooted at *data_dir*."""
        self.data_dir = Path(data_dir)
        self.state_file = self.data_dir / "session_state.json"
        self.data_dir.mkdir(parents=True, exist_ok=True)

    def load_session_state(self) -> Dict:
        """Load session state from file."""
        if self.state_file.exists():
            try:
                with open(self.state_file, 'r', encoding='utf-8') as f:
                    return json.load(f)
            except (OSError, json.JSONDecodeError) as e:
                logger.warning(f"Could not load session state: {e}")

        return {
            'next_session_number': 1,
            'sessions': {},
            'created_at': datetime.now().isoformat()
        }

    def save_session_state(self, state: Dict):
        """Save session state to file."""
        with open(self.state_file, 'w', encoding='utf-8') as f:
            json.dump(state, f, indent=2, default=str)

    def create_new_session(self) -> Tuple[str, Path]:
        """Create the next numbered scan session and its sub-folders."""
        state = self.load_session_state()

        session_number = state['next_session_number']
        timestamp = datetime.now()

        session_name = f"scan_{session_number:03d}"
        session_dir = self.data_dir / session_name

        session_dir.mkdir(exist_ok=True)
        for subdir in SESSION_SUBDIRS:
            (session_dir / subdir).mkdir(exist_ok=True)

        state['sessions'][session_name] = {
            'session_number': session_number,
            'timestamp': timestamp.isoformat(),
            'created_at': timestamp.strftime('%Y-%m-%d %H:%M:%S'),
            'session_dir': str(session_dir)
        }
        state['next_session_number'] = session_number + 1

        self.save_session_state(state)

        logger.info(f"Created new session: {session_name}")
        return session_name, session_dir

    def record_scan_summary(self, session_name: str, summary: Dict[str, Any]) -> None:
        """Attach scan totals (raw mentions, unique trends, sources) to a session."""
        state = self.load_session_state()
        if session_name not in state['sessions']:
            raise KeyError(f"Unknown session: {session_name}")
        state['sessions'][session_name]['summary'] = summary
        self.save_session_state(state)

    def get_latest_session(self) -> Optional[Tuple[str, Path]]:
        """Get the most recent session."""
        state = self.load_session_state()

        if not state['sessions']:
            return None

        latest_session_name = max(state['sessions'].keys(),
                                  key=lambda x: state['sessions'][x]['session_number'])
        latest_session_dir = Path(state['sessions'][latest_session_name]['session_dir'])

        return latest_session_name, latest_session_dir

    def list_sessions(self) -> Dict:
        """List all sessions with metadata."""
        state = self.load_session_state()
        return state['sessions']

    def cleanup_old_sessions(self, keep_count: int = 20) -> int:
        """Delete all but the *keep_count* most recent sessions."""
        state = self.load_session_state()
        sessions = state['sessions']

        if len(sessions) <= keep_count:
            return 0

        sorted_sessions = sorted(sessions.items(),
                                 key=lambda x: x[1]['session_number'],
                                 reverse=True)

        sessions_to_keep = dict(sorted_sessions[:keep_count])
        sessions_to_remove = dict(sorted_sessions[keep_count:])

        cleaned_count = 0
        for session_name, session_info in sessions_to_remove.items():
            session_dir = Path(session_info['session_dir'])
            if session_dir.exists():
                shutil.rmtree(session_dir)
                cleaned_count += 1
                logger.info(f"🗑️ Cleaned up old session: {session_name}")

        state['sessions'] = sessions_to_keep
        self.save_session_state(state)

        if cleaned_count > 0:
            logger.info(f"🧹 Cleaned up {cleaned_count} old sessions")

        return cleaned_count


def main(argv=None):
    """CLI interface for session management."""
    import argparse

    logging.basicConfig(level=logging.INFO)

    parser = argparse.ArgumentParser(description="Scan session management utilities")
    parser.add_argument("--data-dir", default="data", help="Directory holding scan sessions")
    parser.add_argument("--list", action="store_true", help="List all sessions")
    parser.add_argument("--cleanup", type=int, nargs="?", const=20, help="Clean up old sessions (keep N most recent)")
    parser.add_argument("--create", action="store_true", help="Create a new session")

    args = parser.parse_args(argv)

    manager = SessionManager(args.data_dir)

    if args.list:
        sessions = manager.list_sessions()
        print("📁 SESSIONS:")
        print("=" * 50)
        for session_name, info in sorted(sessions.items(),
                                         key=lambda x: x[1]['session_number'],
                                         reverse=True):
            print(f"{info['session_number']:3d}. {session_name}")
            print(f"     📅 {info['created_at']}")
            print(f"     📂 {info['session_dir']}")
            summary = info.get('summary')
            if summary:
                print(f"     📊 {summary.get('unique_count', 0)} trends from {summary.get('total_raw', 0)} mentions")
            print()

    elif args.cleanup is not None:
        count = manager.cleanup_old_sessions(args.cleanup)
        print(f"🧹 Cleaned up {count} old sessions")

    elif args.create:
        session_name, session_dir = manager.create_new_session()
        print(f"✅ Created new session: {session_name}")
        print(f"📂 Location: {session_dir}")

    else:
        parser.print_help()


if __name__ == "__main__":
    main()
