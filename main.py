from rich import print

from starev import Problem
from starev import filters
from starev import search
from starev import sta_hash
from starev.config import console_setup


def main():
    console_setup()

    n = 9
    h = 0x52BC6CE4
    print("target hash:", hex(h))

    problem = Problem(length=n, target=h, printable=tuple(range(n)))
    accept = problem.make_filter(charset=filters.UPPER_FILENAME, first=filters.ALPHA)
    result = search(problem, accept, jobs=4)

    print(result)
    for m in result.matches:
        assert sta_hash(m) == h
        print(m.decode())


if __name__ == "__main__":
    main()
