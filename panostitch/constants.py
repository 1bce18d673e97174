
# Edge length, in pixels, of one tile served by the tile endpoint.
TILE_SIZE = 512

DEFAULT_ZOOM = 4

# Pixels whose channels all stay within this distance of the background
# are treated as padding when trimming the stitched panorama.
TRIM_THRESHOLD = 6

BLACK = (0, 0, 0)

# One request per 200ms, no bursting beyond a single immediate request.
RATE_INTERVAL = 0.2
RATE_BURST = 1

REQUEST_TIMEOUT = 30
JPEG_QUALITY = 95

TILE_ENDPOINT = "https://cbk0.google.com/cbk"
