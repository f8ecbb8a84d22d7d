"""
Numerical constants shared by the sampling engine and the estimators.

Single place for every threshold that changes which code path runs or
what value is substituted, so tests and backends agree on them.
"""

# Off-diagonal entries with |Σ[i,j]| at or below this are treated as zero
# when classifying a covariance matrix.
DIAGONAL_TOLERANCE = 1e-10

# Smallest eigenvalue allowed for a covariance matrix, relative to its
# largest absolute entry. Anything more negative is not a covariance.
PSD_TOLERANCE = 1e-10

# Replacement for a zero standard error when it feeds a bootstrap draw.
ZERO_SE_EPSILON = 1e-10

# Untruncated draws used to estimate the rejection rate before sampling.
REJECTION_TRIAL_DRAWS = 1000
