# Indexes of the 6D floating-base vectors (angular part first, then linear)
AX = 0
AY = 1
AZ = 2
LX = 3
LY = 4
LZ = 5

# Indexes of 3D vectors
X = 0
Y = 1
Z = 2
