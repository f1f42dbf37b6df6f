"""CLI script that logs in to a running tracker API and prints the board.
Usage: python scripts/show_board.py --email EMAIL --password PASSWORD [--base-url URL]
"""
import sys
import argparse
import pathlib
# Ensure `backend/` is on sys.path so `tracker` package imports work when running this script directly
ROOT = pathlib.Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))
from tracker.client import ApiError, TrackerClient


def render_board(board: dict) -> str:
    """Format the board as one block per status column."""
    lines = []
    by_status = board["stats"]["byStatus"]
    for status, items in board["columns"].items():
        lines.append(f"{status.upper()} ({by_status.get(status, 0)})")
        for item in items:
            extra = f" @ {item['location']}" if item.get("location") else ""
            flag = " [referral]" if item.get("referral") else ""
            lines.append(f"  #{item['id']} {item['company']} - {item['role']}{extra}{flag}")
        lines.append("")
    lines.append(f"TOTAL {board['stats']['total']}")
    return "\n".join(lines)


def main(base_url: str, email: str, password: str) -> int:
    """Log in, fetch the board and print it to stdout."""
    with TrackerClient(base_url=base_url) as client:
        try:
            client.login(email, password)
            board = client.board()
        except ApiError as e:
            print(f"Error ({e.status_code}): {e.message}")
            return 1
    print(render_board(board))
    return 0


if __name__ == '__main__':
    parser = argparse.ArgumentParser(description='Print the application board for a user')
    parser.add_argument('--base-url', default='http://localhost:8000')
    parser.add_argument('--email', required=True)
    parser.add_argument('--password', required=True)
    args = parser.parse_args()
    sys.exit(main(args.base_url, args.email, args.password))
