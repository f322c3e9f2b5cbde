"""Public, fixed values published by the game operator.

Current seeding event: https://bitcointalk.org/index.php?topic=5485695
Previous seeding event: https://bitcointalk.org/index.php?topic=2807542
"""

APP_SLUG = "bustabit"
ORACLE_URL = "https://server.actuallyfair.com/graphql"

GAME_SALT = "000000000000000000011f6e135efe67d7463dfe7bb955663ef88b1243b2deea"
COMMITMENT = "567a98370fb7545137ddb53687723cf0b8a1f5e93b1f76f4a1da29416930fa59"
VX_PUB_KEY = (
    "b40c94495f6e6e73619aeb54ec2fc84c5333f7a88ace82923946fc5b6c8635b0"
    "8f9130888dd96e1749a1d5aab00020e4"
)

# The previous chain ends where the current one begins.
PREV_CHAIN_LENGTH = 10_000_000
PREV_GAME_SALT = "0000000000000000004d6ec16dafe9d8370958664c1dc422f452892264c59526"
PREV_COMMITMENT = "86728f5fc3bd99db94d3cdaf105d67788194e9701bf95d049ad0e1ee3d004277"

MAX_ITERATIONS = 1000
