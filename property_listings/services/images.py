import re
from typing import Optional
from urllib.parse import urlencode

# Asset ids look like image-<hash>-<width>x<height>-<format>
_ASSET_REF = re.compile(r"^image-(?P<hash>[A-Za-z0-9]+)-(?P<dims>\d+x\d+)-(?P<fmt>[a-z0-9]+)$")

CDN_BASE = "https://cdn.sanity.io/images"


def image_url(
    image: Optional[dict],
    project_id: str,
    dataset: str,
    width: Optional[int] = None,
    height: Optional[int] = None,
) -> Optional[str]:
    if not image:
        return None
    asset = image.get("asset") or {}
    ref = asset.get("_ref") or asset.get("_id")
    match = _ASSET_REF.match(ref or "")
    if not match:
        return None
    url = f"{CDN_BASE}/{project_id}/{dataset}/{match['hash']}-{match['dims']}.{match['fmt']}"
    params = {k: v for k, v in (("w", width), ("h", height)) if v}
    return f"{url}?{urlencode(params)}" if params else url
