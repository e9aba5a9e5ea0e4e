from starev import Problem
from starev import sta_hash

# first byte known, everything else printable
expected = b"MAP01"

problem = Problem(
    length=5,
    target=sta_hash(expected),
    printable=(1, 2, 3, 4),
    fixed={0: ord("M")},
)
