# Adler-32 arithmetic
MODULUS = 65521  # largest prime below 2**16

# Largest n such that 255n(n + 1) / 2 + (n + 1)(MODULUS - 1) <= 2**32 - 1
NMAX = 5552

STRIDE = 16  # scalar unroll width; NMAX is a multiple of it
LANE_WIDTH = 32  # vector lane width in bytes
LANES_PER_BLOCK = NMAX // LANE_WIDTH

INITIAL_VALUE = 1  # s1 = 1, s2 = 0


# Container framing
ZLIB_HEADER = b"\x78\x5e"  # CM=8 (deflate), CINFO=7 (32K window), FLEVEL=1
HEADER_SIZE = 2
TRAILER_SIZE = 4

ZLIB_CM_DEFLATE = 8
ZLIB_MAX_CINFO = 7
ZLIB_FLAG_FDICT = 1 << 5

DEFAULT_LEVEL = 6
RAW_DEFLATE_WBITS = -15


# Engine names
ENGINE_SCALAR = "scalar"
ENGINE_VECTOR = "vector"
ENGINE_ZLIB = "zlib"
ENGINE_AUTO = "auto"

DEFAULT_VECTOR_THRESHOLD = 4096
DEFAULT_READ_SIZE = 1_048_576  # 1 MiB


def nmax_for(modulus: int, width: int = 32) -> int:
    """Largest number of byte steps before ``s1``/``s2`` must be reduced.

    Solves ``255n(n + 1) / 2 + (n + 1)(modulus - 1) <= 2**width - 1`` for n.
    """
    limit = (1 << width) - 1
    n = 0
    while 255 * (n + 1) * (n + 2) // 2 + (n + 2) * (modulus - 1) <= limit:
        n += 1
    return n
