import os

DATA_DIR = os.path.join(os.path.dirname(__file__), 'data')


def get_data(*paths):
    return os.path.join(DATA_DIR, *paths)


def read_text(path):
    with open(path) as fh:
        return fh.read()


def write_text(path, content):
    with open(path, 'w') as fh:
        fh.write(content)
    return str(path)


def split_records(text):
    """
    split fasta/q text written by pairfq (one line per sequence) into a list of records
    """
    lines = text.splitlines()
    records = []
    i = 0
    while i < len(lines):
        size = 4 if lines[i].startswith('@') else 2
        records.append('\n'.join(lines[i:i + size]))
        i += size
    return records
