"""Console script for report2xlsx."""
import argparse
import glob
import logging
import os
import sys
from .report2xlsx import REPORT2XLSX
from .config import LayoutConfig, ConfigError

EXTENSIONS = ('*.xls', '*.mht')


def input_files(paths):
    """Expand directories into the reports they contain.  Returns (files, missing)"""
    files = []
    missing = []
    for path in paths:
        if os.path.isdir(path):
            found = []
            for ext in EXTENSIONS:
                found += glob.glob(os.path.join(path, ext))
            files += sorted(found)
        elif os.path.isfile(path) or '://' in path:
            files.append(path)
        else:
            missing.append(path)
    return files, missing


def output_filename(path, outdir=None):
    base = os.path.splitext(os.path.split(path)[-1])[0] + '.xlsx'
    if outdir:
        return os.path.join(outdir, base)
    if '://' in path:
        return base
    return os.path.join(os.path.dirname(path), base)


def main(argv=None):
    """Console script for report2xlsx."""
    parser = argparse.ArgumentParser(usage='report2xlsx [-v] [-o dir] [-c config.yaml] path ... - converts '
            'report.xls/report.mht (or every one in a directory) and generates report.xlsx ....')
    parser.add_argument("-v", "--verbose", help="log what's happening during the conversion",
                    action="store_true")
    parser.add_argument("-o", "--outdir", help="write the xlsx files here instead of beside the inputs")
    parser.add_argument("-c", "--config", help="YAML file of layout settings")
    parser.add_argument('_', nargs='+', metavar='path')
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING,
                        format='%(levelname)s %(name)s: %(message)s')

    config = None
    if args.config:
        try:
            config = LayoutConfig.from_yaml(args.config)
        except (OSError, ConfigError) as e:
            print(f'Error reading {args.config}: {e}', file=sys.stderr)
            return 1

    files, missing = input_files(args._)
    for path in missing:
        print(f'Error: Not found: {path}', file=sys.stderr)
    if not files:
        print('No .xls or .mht files found.')
        return 1 if missing else 0
    if args.outdir:
        os.makedirs(args.outdir, exist_ok=True)

    success = 0
    failure = 0
    for path in files:
        filename = output_filename(path, args.outdir)
        try:
            REPORT2XLSX(path, config=config).to_xlsx(filename=filename)
            print(f'Converted: {os.path.basename(path)} -> {os.path.basename(filename)}')
            success += 1
        except Exception as e:
            print(f'Error converting {os.path.basename(path)}: {e}', file=sys.stderr)
            logging.getLogger(__name__).debug('Traceback:', exc_info=True)
            failure += 1

    print()
    print(f'Done. {success} succeeded, {failure} failed.')
    return 1 if failure or missing else 0


if __name__ == "__main__":
    sys.exit(main())  # pragma: no cover
