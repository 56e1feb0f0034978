import argparse
import logging
import sys
from pathlib import Path

from core.logging_setup import setup_console_logging

setup_console_logging()
log = logging.getLogger("cli")


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Download certification question banks")
    parser.add_argument("courses", nargs="*", help="Course short names, e.g. SAA-C03")
    parser.add_argument(
        "--data-dir",
        type=Path,
        default=None,
        help="Directory for downloaded courses (default: CLOUDMASTER_DATA_DIR or ./data)",
    )
    parser.add_argument(
        "--timeout",
        type=float,
        default=None,
        help="HTTP timeout in seconds; 0 disables it",
    )
    parser.add_argument(
        "--list",
        action="store_true",
        help="Print the course catalog and exit",
    )
    parser.add_argument(
        "--markdown",
        nargs=2,
        metavar=("FILE", "COURSE"),
        help="Parse a local markdown file for COURSE and print a summary",
    )
    return parser.parse_args(argv)


def print_catalog(catalog) -> None:
    for course in catalog.all():
        print(f"{course.short_name:<12} {course.company:<22} {course.full_name}")


def summarize_markdown(path: Path, course_id: str) -> int:
    from errors import ParseError
    from image_fetch import count_images
    from markdown_extract import MarkdownQuestionExtractor

    extractor = MarkdownQuestionExtractor(course_id)
    try:
        questions = extractor.extract(path.read_text(encoding="utf-8-sig"))
    except ParseError as e:
        log.error("%s", e)
        return 1
    multiple = sum(1 for q in questions if q.is_multiple_response)
    print(f"{course_id}: {len(questions)} questions ({multiple} multiple response), "
          f"{count_images(questions)} images, {extractor.skipped} blocks skipped")
    return 0


def download_courses(catalog, course_ids: list[str], data_dir: Path | None, timeout: float | None) -> int:
    from api.config import HTTP_TIMEOUT_SECONDS
    from api.services.ingestion_manager import IngestionManager
    from api.services.ingestion_service import CourseIngestionPipeline

    unknown = [course_id for course_id in course_ids if course_id not in catalog]
    if unknown:
        log.error("Unknown course(s): %s", ", ".join(unknown))
        return 2

    if timeout is None:
        timeout = HTTP_TIMEOUT_SECONDS
    elif timeout <= 0:
        timeout = None

    pipeline = CourseIngestionPipeline(data_dir=data_dir, timeout=timeout)
    manager = IngestionManager(pipeline)
    courses = [catalog.get(course_id) for course_id in course_ids]
    failures: list[str] = []
    last_percent = [-1]

    def on_progress(snapshot) -> None:
        percent = int(snapshot.progress * 100)
        if percent != last_percent[0]:
            last_percent[0] = percent
            print(f"\rProgress: {percent:3d}% ({snapshot.completed}/{snapshot.total})", end="", flush=True)

    def on_complete(result) -> None:
        if not result.succeeded:
            failures.append(result.course_id)
        print()
        print(result.message)

    batch = manager.ingest_many(courses, on_progress=on_progress, on_complete=on_complete)
    try:
        batch.wait()
    except KeyboardInterrupt:
        log.warning("Interrupted, cancelling downloads")
        batch.cancel()
        batch.wait()
        return 130
    finally:
        manager.shutdown()

    return 1 if failures else 0


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)

    if args.markdown:
        file_name, course_id = args.markdown
        return summarize_markdown(Path(file_name), course_id)

    from api.services.course_service import CourseCatalog

    catalog = CourseCatalog.from_file()
    if args.list:
        print_catalog(catalog)
        return 0
    if not args.courses:
        log.error("No courses given; use --list to see the catalog")
        return 2
    return download_courses(catalog, args.courses, args.data_dir, args.timeout)


if __name__ == "__main__":
    sys.exit(main())
