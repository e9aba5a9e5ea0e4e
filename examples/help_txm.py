from starev import Problem
from starev import sta_hash

# a file name whose extension is known; the stem is upper case letters
expected = b"HELP.TXM"

problem = Problem(
    length=8,
    target=sta_hash(expected),
    alphabetic=(0, 1, 2, 3),
    suffix=b".TXM",
)
