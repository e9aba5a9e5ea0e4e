from starev import Problem
from starev import sta_hash

# a four letter word: the hash leaves 6 bits free, and the printable range
# rules cut the candidates further
expected = b"TEST"

problem = Problem(
    length=4,
    target=sta_hash(expected),
    printable=(0, 1, 2, 3),
)
