PKG_NAME = "deployctl"

DEFAULT_API_URL = "https://api.vercel.com"

# Deletion API accepts at most this many deployments per run
C_MAX_REMOVALS = 200

# Page limit used when expanding projects into deployments
C_PROJECT_DEPLOYMENTS_MAX = 201

C_VOLUME_CAP = (
    f"Only {C_MAX_REMOVALS} deployments can get deleted at once. "
    "Please continue 10 minutes after deletion to remove the rest."
)
# Matches the connection pool limit of httpx client
C_MAX_CONCURRENCY = 100
