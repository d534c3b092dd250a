"""Static constants for URL canonicalization and domain extraction."""

TRACKING_PARAM_PREFIXES = ("utm_", "vero_", "mc_")

TRACKING_PARAMS = {
    "gclid",
    "fbclid",
    "igshid",
    "yclid",
    "vero_conv",
    "vero_id",
    "mc_cid",
    "mc_eid",
    "spm",
    "camp",
    "campaign",
    "aff",
    "ref",
    "ref_src",
    "referrer",
    "si",
    "s",
    "feature",
    "t",
    "dclid",
    "msclkid",
    "scid",
    "oly_enc_id",
    "oly_anon_id",
}

# Query keys kept per service; everything else is dropped before sorting.
YOUTUBE_KEEP_PARAMS = {"v", "list"}
GOOGLE_SEARCH_KEEP_PARAMS = {"q"}
AMAZON_KEEP_PARAMS = {"k", "node"}

GOOGLE_DOC_KINDS = ("document", "spreadsheets", "presentation", "forms")

MULTI_LEVEL_TLDS = {
    "co.uk",
    "ac.uk",
    "gov.uk",
    "ltd.uk",
    "me.uk",
    "org.uk",
    "plc.uk",
    "sch.uk",
    "co.jp",
    "ne.jp",
    "or.jp",
    "ac.jp",
    "ad.jp",
    "co.kr",
    "or.kr",
    "go.kr",
    "co.nz",
    "gov.nz",
    "ac.nz",
    "com.au",
    "gov.au",
    "edu.au",
    "net.au",
    "org.au",
    "com.br",
    "com.cn",
    "com.hk",
    "co.in",
    "firm.in",
    "gen.in",
    "ind.in",
    "co.za",
}
