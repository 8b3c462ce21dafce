# Block size for GPU computations
BLOCK_SIZE = 256

# Integer identifiers of the integration methods, as passed to the kernels
EULER_ID = 0
RK4_ID = 1

# Recognized values of the `coupling` argument for square general matrices
COUPLING_PAIRED = "paired"
COUPLING_DIAGONAL = "diagonal"


