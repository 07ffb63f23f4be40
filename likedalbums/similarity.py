"""String similarity for album name matching."""


def levenshtein_distance(str1: str, str2: str) -> int:
    """Minimum number of single-character insertions, deletions and substitutions."""
    m = len(str1)
    n = len(str2)

    # (m+1) x (n+1) cost table; row/column 0 is the cost against an empty prefix
    dp = [[0] * (n + 1) for _ in range(m + 1)]
    for i in range(m + 1):
        dp[i][0] = i
    for j in range(n + 1):
        dp[0][j] = j

    for i in range(1, m + 1):
        for j in range(1, n + 1):
            cost = 0 if str1[i - 1] == str2[j - 1] else 1
            dp[i][j] = min(
                dp[i - 1][j] + 1,  # deletion
                dp[i][j - 1] + 1,  # insertion
                dp[i - 1][j - 1] + cost,  # substitution
            )

    return dp[m][n]


def string_similarity(str1: str, str2: str) -> float:
    """
    Similarity score in [0, 1] derived from the edit distance.

    Empty strings never match anything, identical strings score exactly 1.
    """
    if not str1 or not str2:
        return 0.0
    if str1 == str2:
        return 1.0

    distance = levenshtein_distance(str1, str2)
    return 1 - distance / max(len(str1), len(str2))
