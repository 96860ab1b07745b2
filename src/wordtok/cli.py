"""Command line interface: train, encode, decode, tokenize and inspect tokenizers."""

import argparse
import logging
import sys
from pathlib import Path

from ._sanitise import render_merge
from .errors import WordTokError
from .factory import from_pretrained, get_tokenizer
from .trainer import DEFAULT_MAX_MERGES, DEFAULT_MIN_FREQUENCY

# number of merges listed by `info`
INFO_MERGE_PREVIEW = 30

log = logging.getLogger(__name__)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="wordtok", description="BPE tokenizer CLI.")
    parser.add_argument(
        "-v", "--verbose", action="store_true", help="Log progress and learned merges."
    )
    sub = parser.add_subparsers(dest="cmd", required=True)

    train = sub.add_parser("train", help="Train BPE and save vocab+merges.")
    train.add_argument("corpus", type=Path, help="UTF-8 training corpus.")
    train.add_argument("out", type=Path, help="Output artifact path.")
    train.add_argument(
        "--minfreq",
        type=int,
        default=DEFAULT_MIN_FREQUENCY,
        help="Minimum word and pair frequency.",
    )
    train.add_argument(
        "--ops",
        type=int,
        default=DEFAULT_MAX_MERGES,
        help="Maximum number of merge operations.",
    )

    encode = sub.add_parser("encode", help="Encode text to space-separated ids.")
    encode.add_argument("vocab", type=Path, help="Trained artifact.")
    encode.add_argument("text", nargs="+", help="Text to encode.")

    decode = sub.add_parser("decode", help="Decode ids to text.")
    decode.add_argument("vocab", type=Path, help="Trained artifact.")
    decode.add_argument("ids", nargs="+", help="Token ids; non-integers are ignored.")

    tokenize = sub.add_parser("tokenize", help="Show token pieces for text.")
    tokenize.add_argument("vocab", type=Path, help="Trained artifact.")
    tokenize.add_argument("text", nargs="+", help="Text to tokenize.")

    info = sub.add_parser("info", help="Show vocab/merges info.")
    info.add_argument("vocab", type=Path, help="Trained artifact.")

    return parser


def _parse_ids(raw_ids: list[str]) -> list[int]:
    """Parse integer ids, dropping anything that is not one."""
    ids: list[int] = []
    for raw in raw_ids:
        try:
            ids.append(int(raw, 10))
        except ValueError:
            log.warning(f"ignoring non-integer id {raw!r}")
    return ids


def _run(args: argparse.Namespace, parser: argparse.ArgumentParser) -> None:
    match args.cmd:
        case "train":
            text = args.corpus.read_text(encoding="utf-8")
            tok = get_tokenizer()
            tok.train(
                text,
                min_frequency=args.minfreq,
                max_merges=args.ops,
                verbose=args.verbose,
            )
            tok.save(args.out)
            print(f"Saved BPE vocab+merges to {args.out}")
        case "encode":
            tok = from_pretrained(args.vocab)
            ids = tok.encode(" ".join(args.text))
            print(" ".join(str(i) for i in ids))
        case "decode":
            ids = _parse_ids(args.ids)
            if not ids:
                parser.error("decode requires at least one integer id")
            tok = from_pretrained(args.vocab)
            print(tok.decode(ids))
        case "tokenize":
            tok = from_pretrained(args.vocab)
            print(" | ".join(tok.tokenize(" ".join(args.text))))
        case "info":
            tok = from_pretrained(args.vocab)
            preview = ", ".join(
                render_merge(pair) for pair in tok.get_merges(INFO_MERGE_PREVIEW)
            )
            print(f"Vocab size (tokens): {tok.vocab_size()}")
            print(f"Merges count: {tok.n_merges()}")
            print(f"First {INFO_MERGE_PREVIEW} merges: {preview}")


def main(argv: list[str] | None = None) -> int:
    """Run the CLI and return a process exit code."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.INFO if args.verbose else logging.WARNING,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%H:%M:%S",
    )

    try:
        _run(args, parser)
    except (WordTokError, OSError, UnicodeDecodeError) as e:
        log.error(str(e))
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
