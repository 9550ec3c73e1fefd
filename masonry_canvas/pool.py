"""Image resource pool.

A fixed pool of image URLs. Tiles pick an entry deterministically from their
id and retry offset, and fetched resources are deduplicated by
:func:`canonical_identity` (the redirect-resolved URL without query string).
"""

from typing import Sequence
from urllib.parse import urlsplit, urlunsplit

from masonry_canvas.types import Identity, TileID

_CLOUDINARY_ROOT = "https://res.cloudinary.com/ddqdz2qyi/image/upload"

DEFAULT_POOL: tuple[str, ...] = tuple(
    f"{_CLOUDINARY_ROOT}/{path}"
    for path in (
        "v1749603018/IMG-20250601-WA0048_rlbwn3.jpg",
        "v1749603017/IMG-20250601-WA0047_n5ct9h.jpg",
        "v1749603016/IMG-20250530-WA0022_dtwfhb.jpg",
        "v1749603016/IMG-20250601-WA0044_tzr66n.jpg",
        "v1749603016/IMG-20250521-WA0057_n12gnn.jpg",
        "v1749603015/IMG-20250521-WA0055_lvp9i4.jpg",
        "v1749603015/IMG-20250521-WA0056_fiejvu.jpg",
        "v1749603011/IMG-20250521-WA0051_raikl5.jpg",
        "v1749603008/IMG-20250521-WA0050_kcl3jw.jpg",
        "v1749603008/IMG-20250521-WA0047_iv4kqg.jpg",
        "v1749603008/IMG-20250521-WA0046_yhw7hx.jpg",
        "v1749603008/IMG-20250521-WA0049_e6v3gu.jpg",
        "v1749603007/IMG-20250521-WA0045_hx0rou.jpg",
        "v1749602980/IMG-20250521-WA0044_prfjme.jpg",
        "v1749602922/IMG-20250521-WA0042_o7ywu3.jpg",
        "v1749602918/IMG-20250521-WA0039_jar6zv.jpg",
        "v1749602918/IMG-20250521-WA0037_jsjo3n.jpg",
        "v1749602916/IMG-20250521-WA0036_yvbkaa.jpg",
        "v1749602915/IMG-20250521-WA0034_gcinz0.jpg",
        "v1749602914/IMG-20250521-WA0027_jyizvk.jpg",
        "v1749602913/IMG-20250513-WA0009_ys5qlc.jpg",
        "v1749602910/IMG-20250513-WA0007_cgrhrs.jpg",
        "v1749602909/IMG-20250513-WA0006_nxvf5s.jpg",
        "v1749602909/IMG-20250513-WA0004_kbwbim.jpg",
        "v1749602907/IMG-20250513-WA0001_uu9eia.jpg",
        "v1749602908/IMG-20250513-WA0003_oqecz8.jpg",
        "v1749602907/IMG-20250513-WA0002_laiqap.jpg",
        "v1749602904/IMG-20250513-WA0000_o0v3ta.jpg",
        "v1749602903/IMG-20250512-WA0107_w15qn8.jpg",
        "v1749602902/IMG-20250501-WA0040_dneamz.jpg",
        "v1749602901/IMG-20250501-WA0039_cjygb9.jpg",
        "v1749602900/IMG-20250501-WA0038_da1q6z.jpg",
        "v1749602900/IMG-20250501-WA0037_mcggsx.jpg",
        "v1749602897/IMG-20250501-WA0036_jynfrk.jpg",
        "v1749602895/IMG-20250501-WA0035_xr3x8x.jpg",
        "v1749602895/IMG-20250501-WA0034_xfa7u7.jpg",
        "v1749602895/IMG-20250501-WA0033_cavhi1.jpg",
        "v1749602894/20250607_205702_wbodqu.jpg",
        "v1749602892/20250607_205657_b8bz6c.jpg",
        "v1749602891/20250601_151104_ooizb0.jpg",
        "v1749602890/20250601_151052_tpwx5a.jpg",
        "v1749602889/20250525_163309_qlvx85.jpg",
        "v1749602889/20250601_151048_ijpqkg.jpg",
        "v1749602887/20250430_194809_fibgvq.jpg",
        "v1749602885/20250430_194743_1_rjn3ai.jpg",
        "v1749602885/20250430_194743_r9vcrb.jpg",
        "v1749602885/20250430_194717_ezxptd.jpg",
        "v1749602884/20250430_194657_bgoowa.jpg",
        "v1749602883/20250430_194542_s4ac7h.jpg",
        "v1749602883/20250430_194533_fd9stx.jpg",
        "v1749602882/20250430_194455_atxbez.jpg",
        "v1749602881/20250430_194233_swjic2.jpg",
        "v1749602880/20250430_194217_bv0m06.jpg",
        "v1749602880/20250430_194226_bfhkrg.jpg",
        "v1749602879/20250428_212424_gip2db.jpg",
        "v1749602879/20250428_212417_bbljjo.jpg",
        "v1749602878/20250425_182610_ys1auv.jpg",
        "v1749602878/20250425_182641_eqfqyt.jpg",
        "v1749602878/20250425_182601_j2zrwy.jpg",
        "v1749604866/Imagem_do_WhatsApp_de_2025-06-10_%C3%A0_s_22.16.03_9f4e86c2_s04ide.jpg",
        "v1749604866/Imagem_do_WhatsApp_de_2025-06-10_%C3%A0_s_22.16.03_bd376f79_jc6t3t.jpg",
        "v1749604867/casa_rqhgvy.jpg",
    )
)


def select_url(pool: Sequence[str], tile_id: TileID, attempt: int = 0) -> str:
    """Pick the pool entry for ``tile_id``; ``attempt`` advances past duplicates."""
    if not pool:
        raise ValueError("Resource pool is empty")
    return pool[(tile_id + attempt) % len(pool)]


def canonical_identity(url: str) -> Identity:
    """Strip query string and fragment so equivalent URLs compare equal."""
    parts = urlsplit(url)
    return urlunsplit((parts.scheme, parts.netloc, parts.path, "", ""))
