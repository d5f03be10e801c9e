"""
Print the most relevant tokens of a song corpus per time section.

Usage (example):
    uv run python scripts/relevance_report.py songs.jsonl --from 1960 --to 1989 \
        --artist "bob dylan" --top-n 10 --plot relevance.png

The corpus file holds one JSON object per line with the fields
id, artist, year, compilation and tokens.
"""

from __future__ import annotations

import argparse
import logging
from pathlib import Path

from lyra_relevance.analyzer import LyricsAnalyzer
from lyra_relevance.config import Config
from lyra_relevance.songs import SongCorpus


def plot_sections(results: dict[tuple[int, int], dict[int, set[str]]], out_path: Path) -> None:
    """One horizontal bar chart per section, tokens ordered by frequency."""
    import matplotlib.pyplot as plt

    sections = [section for section, buckets in results.items() if buckets]
    if not sections:
        print("Nothing to plot: no section matched any song.")
        return

    fig, axes = plt.subplots(len(sections), 1, figsize=(8, 3 * len(sections)), squeeze=False)
    for ax, section in zip(axes[:, 0], sections):
        labels, values = [], []
        for frequency, tokens in results[section].items():
            for token in sorted(tokens):
                labels.append(token)
                values.append(frequency)
        ax.barh(labels[::-1], values[::-1])
        ax.set_title(f"{section[0]}-{section[1]}")
        ax.set_xlabel("Frequency")
    fig.tight_layout()
    fig.savefig(out_path)
    print(f"Saved plot to {out_path}")


def main() -> None:
    parser = argparse.ArgumentParser(description="Most relevant tokens per time section.")
    parser.add_argument("corpus", help="Path to a JSONL song corpus.")
    parser.add_argument("--from", dest="year_from", type=int, help="First year (default: earliest song).")
    parser.add_argument("--to", dest="year_to", type=int, help="Last year (default: latest song).")
    parser.add_argument(
        "--artist", action="append", dest="artists", help="Artist to include (repeatable, default: all)."
    )
    parser.add_argument("--top-n", type=int, default=Config.top_n, help=f"Tokens per section (default: {Config.top_n}).")
    parser.add_argument(
        "--section-length",
        type=int,
        default=Config.section_length,
        help=f"Years per section (default: {Config.section_length}).",
    )
    parser.add_argument("--no-compilations", action="store_true", help="Leave out songs from compilations.")
    parser.add_argument("--plot", help="Save a bar chart to this path.")
    parser.add_argument("-v", "--verbose", action="store_true", help="Log progress.")
    args = parser.parse_args()

    if not logging.getLogger().hasHandlers():
        logging.basicConfig(
            level=logging.DEBUG if args.verbose else logging.WARNING, format="[%(levelname)s] %(message)s"
        )

    corpus = SongCorpus.from_jsonl(args.corpus)
    if not len(corpus):
        print(f"No songs in {args.corpus}")
        return

    first_year, last_year = corpus.year_range
    year_from = args.year_from if args.year_from is not None else first_year
    year_to = args.year_to if args.year_to is not None else last_year

    analyzer = LyricsAnalyzer(corpus)
    analyzer.compute_weights()
    results = analyzer.most_relevant_tokens_by_section(
        year_from,
        year_to,
        include_compilations=not args.no_compilations,
        top_n=args.top_n,
        artists=args.artists,
        section_length=args.section_length,
    )

    print(f"Songs: {len(corpus)}, vocabulary: {len(analyzer.vocabulary)}")
    for (start, end), buckets in results.items():
        print(f"\n{start}-{end}")
        if not buckets:
            print("  (no songs)")
            continue
        for frequency, tokens in buckets.items():
            print(f"  {frequency:>5}  {', '.join(sorted(tokens))}")

    if args.plot:
        plot_sections(results, Path(args.plot))


if __name__ == "__main__":
    main()
