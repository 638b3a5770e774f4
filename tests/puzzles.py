"""Shared puzzle fixtures."""

CLASSIC = "003020600900305001001806400008102900700000008006708200002609500800203009005010300"

CLASSIC_SOLUTION = (
    "483921657"
    "967345821"
    "251876493"
    "548132976"
    "729564138"
    "136798245"
    "372689514"
    "814253769"
    "695417382"
)

# Needs search after propagation stalls
HARD = "4.....8.5.3..........7......2.....6.....8.4......1.......6.3.7.5..2.....1.4......"

HARD_PIPES = """
4 . . |. . . |8 . 5
. 3 . |. . . |. . .
. . . |7 . . |. . .
------+------+-----
. 2 . |. . . |. 6 .
. . . |. 8 . |4 . .
. . . |. 1 . |. . .
------+------+-----
. . . |6 . 3 |. 7 .
5 . . |2 . . |. . .
1 . 4 |. . . |. . .
"""

EMPTY = "." * 81

# Two 1s in the first row
DUPLICATE_CLUE = "11" + "." * 79

# r1c9 must be 9 but column 9 already holds one
DEAD_END = "12345678." + "........9" + "." * 63
