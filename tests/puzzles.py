"""Reference puzzles shared by the test modules."""

CLASSIC_PUZZLE = (
    "530070000"
    "600195000"
    "098000060"
    "800060003"
    "400803001"
    "700020006"
    "060000280"
    "000419005"
    "000080079"
)

CLASSIC_SOLUTION = (
    "534678912"
    "672195348"
    "198342567"
    "859761423"
    "426853791"
    "713924856"
    "961537284"
    "287419635"
    "345286179"
)

# Row 1 holds 1..8, so r1c9 must be 9, but column 9 already has a 9 in row 5.
CONTRADICTION_PUZZLE = (
    "123456780"
    "000000000"
    "000000000"
    "000000000"
    "000000009"
    "000000000"
    "000000000"
    "000000000"
    "000000000"
)

# Two 5s in the first row.
DUPLICATE_ROW_PUZZLE = "55" + "0" * 79
