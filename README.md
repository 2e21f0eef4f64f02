# avrobin

A small, dependency-free buffered writer for the Avro binary encoding.

`avrobin.writer.Writer` collects Avro-encoded values in an in-memory buffer
and hands them to any object with a `write(bytes)` method when you flush it.

## Installation

```
pip install avrobin
```

## Usage

```python
import io
from avrobin.writer import Writer

out = io.BytesIO()
w = Writer(out, 64)

w.write_long(27)          # zigzag varint: b"\x36"
w.write_string("foo")     # length-prefixed UTF-8
w.write_bool(True)
w.write_double(1.15)      # 8 bytes, little endian

w.flush()
print(out.getvalue())
```

`Writer(out, buf_size=512)` takes the output object, or `None` when you only
want to build a buffer, and an expected buffer size. A negative `buf_size`
raises `ValueError`.

### Supported values

| Method | Avro encoding |
| --- | --- |
| `write_bool` | one byte, `0x00` or `0x01` |
| `write_int` | 32-bit zigzag varint |
| `write_long` | 64-bit zigzag varint |
| `write_float` | 4-byte IEEE 754, little endian |
| `write_double` | 8-byte IEEE 754, little endian |
| `write_bytes` | long length, then the raw bytes |
| `write_string` | long length, then the UTF-8 bytes |
| `write_block_header` | block count, with the byte size when it is positive |
| `write` | raw bytes, no prefix; returns the number of bytes appended |

`write_int` raises `ValueError` for values outside the signed 32-bit range,
and `write_long` for values outside the signed 64-bit range.

`write_block_header(length, size)` writes just `length` when `size` is zero or
less; otherwise it writes `-length` followed by `size`.

### Blocks

`write_block_cb` writes a block of array or map items together with its
header. The callback receives the writer, writes the items and returns how
many it wrote. The header then records both the item count and the block's
size in bytes, and `write_block_cb` returns the callback's count:

```python
w = Writer(None, 64)

def items(writer):
    writer.write_string("foo")
    writer.write_string("avro")
    return 2

count = w.write_block_cb(items)
# count == 2
# w.buffer() == b"\x03\x12\x06foo\x08avro"
```

### Buffering and errors

`buffered()` gives the number of bytes waiting to be written, and `buffer()`
gives a copy of those bytes. `reset(out)` attaches a new output and drops
whatever was buffered.

With no output attached, `flush()` does nothing. When the output's `write`
raises, the writer keeps that error in its `error` attribute and re-raises it;
every later `flush()` to an attached output raises the stored error again.
Bytes that the output reports as written are removed from the buffer.

## What this package does not do

It only writes. There is no reader or decoder, no schema parsing, and no
encoding of whole records, maps or unions from a schema: you call the
`write_*` methods for each value yourself, in the order the schema requires.

## Running the tests

```
pip install -e ".[test]"
pytest
```