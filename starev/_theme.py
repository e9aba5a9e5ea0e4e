from rich.theme import Theme

theme = Theme(
    {
        #
        "starev.hash": "cyan",
        "starev.match": "green bold",
        "starev.word": "magenta bold",
        "starev.count": "yellow",
        "starev.unsat": "bold reverse red",
        #
        "starev.title": "cyan bold",
        "starev.comment": "white dim italic",
    }
)
