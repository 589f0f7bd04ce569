import sys
from pathlib import Path

def main():
    if len(sys.argv) not in (2, 3):
        print("Usage: corrupt_one_byte.py <logbook> [offset]")
        raise SystemExit(2)

    p = Path(sys.argv[1])
    b = bytearray(p.read_bytes())
    if not b:
        print("File is empty, nothing to corrupt.")
        raise SystemExit(2)

    # Default: last byte, inside the trailing sentinel.
    # The stream cipher resynchronizes after two bytes, so a single flip
    # only disturbs the field(s) covering offset and offset + 1.
    idx = int(sys.argv[2]) if len(sys.argv) == 3 else len(b) - 1
    if not 0 <= idx < len(b):
        print(f"Offset {idx} outside file of {len(b)} bytes.")
        raise SystemExit(2)
    b[idx] ^= 0x01
    p.write_bytes(bytes(b))
    print(f"Corrupted 1 byte at offset {idx} in {p}")

if __name__ == "__main__":
    main()
