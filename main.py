"""
CineShelf - Movie catalog store

CLI entry point for querying and editing the catalog.
"""

import argparse
import json
import logging
import os
import sys

from cineshelf.orchestrator import CatalogService
from cineshelf.utils.errors import CatalogError
import config.settings as settings


def setup_logging(log_level: str = "INFO"):
    """Configure logging for the entire application."""
    logging.basicConfig(
        level=getattr(logging, log_level.upper()),
        format=settings.LOG_FORMAT,
        handlers=[
            # stdout carries command output
            logging.StreamHandler(sys.stderr),
            logging.FileHandler(settings.LOG_FILE)
        ]
    )


def read_payload(source: str) -> dict:
    """Read a JSON object from a file path, or from stdin when source is "-"."""
    if source == "-":
        payload = json.load(sys.stdin)
    else:
        with open(source, 'r', encoding='utf-8') as f:
            payload = json.load(f)

    if not isinstance(payload, dict):
        raise CatalogError(f"Payload must be a JSON object, got {type(payload).__name__}")
    return payload


def emit(data) -> None:
    print(json.dumps(data, indent=2, ensure_ascii=False))


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="CineShelf - movie catalog with reviews",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Second page of dramas, best rated first
  python main.py list --genre Drama --page 2 --page-size 20

  # Add a movie (credential = base64 of the admin password)
  python main.py --token YWRtaW4xMjM= add movie.json

  # Post a review
  echo '{"movieId": 1, "userName": "ana", "rating": 5, "reviewText": "Loved it"}' \\
      | python main.py add-review -

  # Export thrillers as CSV
  python main.py export --genre Thriller --output out/thrillers.csv

Note: Mutating commands read the credential from --token or CINESHELF_TOKEN.
        """
    )

    parser.add_argument(
        "--data-root",
        default=str(settings.DATA_ROOT),
        help=f"Data directory (default: {settings.DATA_ROOT})"
    )

    parser.add_argument(
        "--log-level",
        default=settings.LOG_LEVEL,
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help=f"Logging level (default: {settings.LOG_LEVEL})"
    )

    parser.add_argument(
        "--token",
        default=os.getenv("CINESHELF_TOKEN"),
        help="Admin credential for mutating commands (default: $CINESHELF_TOKEN)"
    )

    commands = parser.add_subparsers(dest="command", required=True)

    list_cmd = commands.add_parser("list", help="List movies")
    list_cmd.add_argument("--search", default="", help="Match title, director or cast")
    list_cmd.add_argument("--genre", default="", help="Genre tag to filter by")
    list_cmd.add_argument("--sort-by", default=settings.DEFAULT_SORT_BY)
    list_cmd.add_argument("--sort-order", default=settings.DEFAULT_SORT_ORDER, choices=["asc", "desc"])
    list_cmd.add_argument("--page", type=int, default=1)
    list_cmd.add_argument("--page-size", type=int, default=settings.DEFAULT_PAGE_SIZE)

    show_cmd = commands.add_parser("show", help="Show one movie")
    show_cmd.add_argument("movie_id", type=int)

    add_cmd = commands.add_parser("add", help="Create a movie from a JSON payload")
    add_cmd.add_argument("payload", help="JSON file, or - for stdin")

    update_cmd = commands.add_parser("update", help="Update a movie from a JSON payload")
    update_cmd.add_argument("movie_id", type=int)
    update_cmd.add_argument("payload", help="JSON file, or - for stdin")

    delete_cmd = commands.add_parser("delete", help="Delete a movie")
    delete_cmd.add_argument("movie_id", type=int)

    reviews_cmd = commands.add_parser("reviews", help="List reviews, newest first")
    reviews_cmd.add_argument("--movie-id", type=int)

    review_cmd = commands.add_parser("review", help="Show one review")
    review_cmd.add_argument("review_id", type=int)

    add_review_cmd = commands.add_parser("add-review", help="Post a review from a JSON payload")
    add_review_cmd.add_argument("payload", help="JSON file, or - for stdin")

    export_cmd = commands.add_parser("export", help="Export movies as CSV")
    export_cmd.add_argument("--search", default="")
    export_cmd.add_argument("--genre", default="")
    export_cmd.add_argument("--sort-by", default=settings.DEFAULT_SORT_BY)
    export_cmd.add_argument("--sort-order", default=settings.DEFAULT_SORT_ORDER, choices=["asc", "desc"])
    export_cmd.add_argument(
        "--output",
        help=f"Write to this file instead of stdout (e.g. {settings.OUTPUT_ROOT / settings.CSV_EXPORT_FILENAME})"
    )

    return parser


def run(service: CatalogService, args: argparse.Namespace) -> None:
    """Dispatch one parsed command against the service."""
    if args.command == "list":
        emit(service.list_movies(
            search=args.search,
            genre=args.genre,
            sort_by=args.sort_by,
            sort_order=args.sort_order,
            page=args.page,
            page_size=args.page_size
        ))
    elif args.command == "show":
        emit(service.get_movie(args.movie_id).to_dict())
    elif args.command == "add":
        emit(service.create_movie(read_payload(args.payload), args.token).to_dict())
    elif args.command == "update":
        emit(service.update_movie(args.movie_id, read_payload(args.payload), args.token).to_dict())
    elif args.command == "delete":
        service.delete_movie(args.movie_id, args.token)
        emit({"success": True, "message": f"Movie {args.movie_id} deleted"})
    elif args.command == "reviews":
        emit([review.to_dict() for review in service.list_reviews(args.movie_id)])
    elif args.command == "review":
        emit(service.get_review(args.review_id).to_dict())
    elif args.command == "add-review":
        emit(service.create_review(read_payload(args.payload)).to_dict())
    elif args.command == "export":
        csv_text = service.export_csv(
            args.token,
            genre=args.genre,
            sort_by=args.sort_by,
            sort_order=args.sort_order,
            search=args.search
        )
        if args.output:
            output_dir = os.path.dirname(args.output)
            if output_dir:
                os.makedirs(output_dir, exist_ok=True)
            with open(args.output, 'w', encoding='utf-8', newline='') as f:
                f.write(csv_text)
        else:
            sys.stdout.write(csv_text)


def main(argv=None):
    """Main CLI entry point."""
    args = build_parser().parse_args(argv)

    setup_logging(args.log_level)
    logger = logging.getLogger(__name__)

    try:
        with CatalogService(data_root=args.data_root, admin_password=settings.ADMIN_PASSWORD) as service:
            run(service, args)
        sys.exit(0)

    except CatalogError as e:
        logger.error(f"{type(e).__name__}: {e}")
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)

    except (OSError, ValueError) as e:
        logger.error(f"Command failed: {e}", exc_info=True)
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
