"""Command-line interface for the image store.

Environment variables:
    IMSTOR_ROOT_PATH: Root directory of the store (unless set by --root or the config file)
"""

import argparse
import logging
import mimetypes
import sys
from pathlib import Path

from dotenv import load_dotenv
from tqdm import tqdm

from .config import Config, load_config
from .errors import ImstorError
from .storage.engine import ImageStorage

IMAGE_EXTENSIONS = {".jpg", ".jpeg", ".png"}


def build_storage(args) -> ImageStorage:
    """Create the storage engine from --config / --root / the environment."""
    if args.config:
        config = load_config(args.config, root_path=args.root)
    elif args.root:
        config = Config(root_path=Path(args.root))
    else:
        config = Config.from_env()
    return ImageStorage(config)


def guess_media_type(path: Path) -> str:
    media_type, _ = mimetypes.guess_type(str(path))
    return media_type or "application/octet-stream"


def store(args, storage: ImageStorage):
    """Store an image file, or every image below a directory."""
    path = Path(args.path)

    if path.is_file():
        media_type = args.media_type or guess_media_type(path)
        checksum = storage.store(media_type, path.read_bytes())
        print(checksum)
    elif path.is_dir():
        files = sorted(p for p in path.rglob("*") if p.is_file() and p.suffix.lower() in IMAGE_EXTENSIONS)
        stored = 0
        failed = 0
        for filepath in tqdm(files, desc="Storing", unit="img"):
            try:
                checksum = storage.store(args.media_type or guess_media_type(filepath), filepath.read_bytes())
                tqdm.write(f"{checksum}  {filepath}")
                stored += 1
            except (ImstorError, OSError) as e:
                tqdm.write(f"Warning: Could not store {filepath}: {e}")
                failed += 1
        print(f"\nStored {stored} image(s), {failed} failure(s).")
        if failed:
            sys.exit(1)
    else:
        print(f"Error: {path} does not exist")
        sys.exit(1)


def store_data_url(args, storage: ImageStorage):
    """Store the image embedded in a data URL."""
    print(storage.store_data_url(args.data_url))


def checksum(args, storage: ImageStorage):
    """Print the checksum of a file or data URL without storing it."""
    if args.data_url:
        print(storage.checksum_data_url(args.data_url))
        return
    if not args.path:
        print("Error: a path or --data-url is required")
        sys.exit(1)
    path = Path(args.path)
    if not path.is_file():
        print(f"Error: {path} is not a file")
        sys.exit(1)
    print(storage.checksum(path.read_bytes()))


def path(args, storage: ImageStorage):
    """Print the root-relative path of a stored image or one of its sizes."""
    if args.size:
        print(storage.path_for_size(args.checksum, args.size))
    else:
        print(storage.path_for(args.checksum))


def has(args, storage: ImageStorage):
    """Exit with status 0 if all sizes are stored for the checksum, 1 otherwise."""
    if storage.has_sizes_for_checksum(args.checksum, args.sizes):
        print("yes")
    else:
        print("no")
        sys.exit(1)


def main(argv=None):
    load_dotenv()
    parser = argparse.ArgumentParser(
        description="imstor - store images and their resized copies by content checksum",
        epilog="Environment variables: IMSTOR_ROOT_PATH",
    )
    parser.add_argument(
        "--config", "-c",
        help="Path to YAML config file with root_path, sizes and formats",
    )
    parser.add_argument(
        "--root", "-r",
        help="Root directory of the store (overrides config and IMSTOR_ROOT_PATH)",
    )
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")

    subparsers = parser.add_subparsers(dest="command", required=True)

    # --- store ---
    store_parser = subparsers.add_parser("store", help="Store an image file or a directory of images")
    store_parser.add_argument("path", help="Image file or directory")
    store_parser.add_argument("--media-type", "-m", help="Media type of the input (default: guessed from extension)")
    store_parser.set_defaults(func=store)

    # --- store-dataurl ---
    dataurl_parser = subparsers.add_parser("store-dataurl", help="Store an image given as a data URL")
    dataurl_parser.add_argument("data_url", help="data: URL, e.g. data:image/png;base64,...")
    dataurl_parser.set_defaults(func=store_data_url)

    # --- checksum ---
    checksum_parser = subparsers.add_parser("checksum", help="Print the checksum of a file or data URL")
    checksum_parser.add_argument("path", nargs="?", help="File to checksum")
    checksum_parser.add_argument("--data-url", help="Checksum the payload of a data URL instead")
    checksum_parser.set_defaults(func=checksum)

    # --- path ---
    path_parser = subparsers.add_parser("path", help="Print the path of a stored image")
    path_parser.add_argument("checksum", help="Checksum of the stored image")
    path_parser.add_argument("--size", "-s", help="Size name (default: the original)")
    path_parser.set_defaults(func=path)

    # --- has ---
    has_parser = subparsers.add_parser("has", help="Check whether sizes are stored for a checksum")
    has_parser.add_argument("checksum", help="Checksum of the stored image")
    has_parser.add_argument("sizes", nargs="+", help="Size names to check")
    has_parser.set_defaults(func=has)

    args = parser.parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        storage = build_storage(args)
        args.func(args, storage)
    except ImstorError as e:
        print(f"Error: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
