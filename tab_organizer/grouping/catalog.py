"""Built-in catalog of service signatures, grouped by category family."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional, Tuple

from tab_organizer.tab_policy.matching import compile_pattern, host_pattern

from .config import CATALOG_RULE_PRIORITY, SPECIFIC_RULE_PRIORITY
from .rules import DeriveStrategy, Rule, order_catalog


@dataclass(frozen=True)
class CatalogEntry:
    category: str
    label: str
    host: Optional[str] = None
    host_regex: Optional[str] = None
    path: Optional[str] = None
    title: Optional[str] = None
    priority: int = CATALOG_RULE_PRIORITY
    color: Optional[str] = None
    derive: DeriveStrategy = DeriveStrategy.IDENTITY
    derive_arg: Optional[str] = None


# (label, host) pairs; a host also matches its subdomains.
CATEGORY_HOSTS: Dict[str, Tuple[Tuple[str, str], ...]] = {
    "Work/PM": (
        ("Jira", "atlassian.net"),
        ("Jira", "jira.com"),
        ("Linear", "linear.app"),
        ("Trello", "trello.com"),
        ("Asana", "asana.com"),
        ("Monday", "monday.com"),
        ("ClickUp", "clickup.com"),
        ("Notion", "notion.so"),
        ("Notion", "notion.site"),
        ("Confluence", "confluence.com"),
        ("Shortcut", "app.shortcut.com"),
        ("Productboard", "productboard.com"),
        ("Basecamp", "basecamp.com"),
        ("Wrike", "wrike.com"),
        ("Smartsheet", "smartsheet.com"),
        ("Airtable", "airtable.com"),
        ("Miro", "miro.com"),
        ("Figma", "figma.com"),
        ("Height", "height.app"),
        ("Todoist", "todoist.com"),
        ("Coda", "coda.io"),
        ("Aha!", "aha.io"),
        ("Pivotal Tracker", "pivotaltracker.com"),
        ("Lucid", "lucid.app"),
        ("Zendesk", "zendesk.com"),
        ("Salesforce", "lightning.force.com"),
        ("HubSpot", "app.hubspot.com"),
        ("Harvest", "harvestapp.com"),
        ("Toggl", "track.toggl.com"),
        ("BambooHR", "bamboohr.com"),
    ),
    "Dev/Code": (
        ("GitHub Gist", "gist.github.com"),
        ("GitHub", "github.com"),
        ("GitLab", "gitlab.com"),
        ("Bitbucket", "bitbucket.org"),
        ("Azure DevOps", "dev.azure.com"),
        ("Sourcegraph", "sourcegraph.com"),
        ("npm", "npmjs.com"),
        ("PyPI", "pypi.org"),
        ("RubyGems", "rubygems.org"),
        ("pkg.go.dev", "pkg.go.dev"),
        ("crates.io", "crates.io"),
        ("Docker Hub", "hub.docker.com"),
        ("Codeberg", "codeberg.org"),
        ("SourceHut", "sr.ht"),
        ("Replit", "replit.com"),
        ("CodeSandbox", "codesandbox.io"),
        ("CodePen", "codepen.io"),
        ("JSFiddle", "jsfiddle.net"),
        ("StackBlitz", "stackblitz.com"),
        ("Gitpod", "gitpod.io"),
        ("Maven Central", "central.sonatype.com"),
        ("NuGet", "nuget.org"),
        ("Packagist", "packagist.org"),
        ("Hex", "hex.pm"),
        ("docs.rs", "docs.rs"),
        ("Read the Docs", "readthedocs.io"),
        ("GitHub Pages", "github.io"),
        ("Hugging Face", "huggingface.co"),
        ("Kaggle", "kaggle.com"),
        ("Travis CI", "travis-ci.com"),
        ("regex101", "regex101.com"),
    ),
    "Cloud/Infra": (
        ("AWS Console", "console.aws.amazon.com"),
        ("GCP Console", "console.cloud.google.com"),
        ("GCP", "cloud.google.com"),
        ("Azure Portal", "portal.azure.com"),
        ("Cloudflare", "cloudflare.com"),
        ("Vercel", "vercel.com"),
        ("Render", "render.com"),
        ("Railway", "railway.app"),
        ("Fly.io", "fly.io"),
        ("Heroku", "heroku.com"),
        ("Supabase", "supabase.com"),
        ("PlanetScale", "planetscale.com"),
        ("Datadog", "datadoghq.com"),
        ("New Relic", "newrelic.com"),
        ("Grafana", "grafana.com"),
        ("Sentry", "sentry.io"),
        ("PagerDuty", "pagerduty.com"),
        ("CircleCI", "circleci.com"),
        ("Buildkite", "buildkite.com"),
        ("DigitalOcean", "cloud.digitalocean.com"),
        ("Linode", "cloud.linode.com"),
        ("Netlify", "app.netlify.com"),
        ("Firebase", "console.firebase.google.com"),
        ("MongoDB Atlas", "cloud.mongodb.com"),
        ("Snowflake", "snowflakecomputing.com"),
        ("Databricks", "cloud.databricks.com"),
        ("Terraform Cloud", "app.terraform.io"),
        ("Honeycomb", "ui.honeycomb.io"),
        ("Splunk", "splunkcloud.com"),
        ("Opsgenie", "opsgenie.com"),
        ("Statuspage", "statuspage.io"),
        ("Hetzner", "console.hetzner.cloud"),
        ("Oracle Cloud", "cloud.oracle.com"),
    ),
    "Docs/Files": (
        ("Google Docs", "docs.google.com"),
        ("Google Drive", "drive.google.com"),
        ("Google Keep", "keep.google.com"),
        ("Dropbox", "dropbox.com"),
        ("Box", "box.com"),
        ("OneDrive", "onedrive.live.com"),
        ("SharePoint", "sharepoint.com"),
        ("Quip", "quip.com"),
        ("Evernote", "evernote.com"),
        ("Obsidian Publish", "publish.obsidian.md"),
        ("Scribd", "scribd.com"),
        ("DocuSign", "docusign.net"),
        ("iCloud", "icloud.com"),
        ("MEGA", "mega.nz"),
        ("WeTransfer", "wetransfer.com"),
        ("Overleaf", "overleaf.com"),
    ),
    "Comms": (
        ("Gmail", "mail.google.com"),
        ("Outlook", "outlook.office.com"),
        ("Outlook", "outlook.live.com"),
        ("Teams", "teams.microsoft.com"),
        ("Teams", "teams.live.com"),
        ("Slack", "slack.com"),
        ("Discord", "discord.com"),
        ("Telegram", "web.telegram.org"),
        ("WhatsApp", "web.whatsapp.com"),
        ("Zoom", "zoom.us"),
        ("Google Meet", "meet.google.com"),
        ("Google Calendar", "calendar.google.com"),
        ("Calendly", "calendly.com"),
        ("Yahoo Mail", "mail.yahoo.com"),
        ("Proton Mail", "mail.proton.me"),
        ("Fastmail", "fastmail.com"),
        ("Zoho Mail", "mail.zoho.com"),
        ("Webex", "webex.com"),
        ("Messenger", "messenger.com"),
        ("Skype", "web.skype.com"),
        ("Mattermost", "mattermost.com"),
        ("Zulip", "zulipchat.com"),
        ("Element", "app.element.io"),
        ("Front", "frontapp.com"),
        ("Intercom", "app.intercom.com"),
        ("Loom", "loom.com"),
    ),
    "Research/Learning": (
        ("Google Scholar", "scholar.google.com"),
        ("arXiv", "arxiv.org"),
        ("Stack Overflow", "stackoverflow.com"),
        ("Stack Exchange", "stackexchange.com"),
        ("MDN", "developer.mozilla.org"),
        ("Wikipedia", "wikipedia.org"),
        ("Medium", "medium.com"),
        ("Dev.to", "dev.to"),
        ("freeCodeCamp", "freecodecamp.org"),
        ("Semantic Scholar", "semanticscholar.org"),
        ("ResearchGate", "researchgate.net"),
        ("PubMed", "pubmed.ncbi.nlm.nih.gov"),
        ("Papers with Code", "paperswithcode.com"),
        ("JSTOR", "jstor.org"),
        ("Nature", "nature.com"),
        ("Coursera", "coursera.org"),
        ("edX", "edx.org"),
        ("Udemy", "udemy.com"),
        ("Khan Academy", "khanacademy.org"),
        ("W3Schools", "w3schools.com"),
        ("GeeksforGeeks", "geeksforgeeks.org"),
        ("Python Docs", "docs.python.org"),
        ("Quora", "quora.com"),
        ("Wolfram Alpha", "wolframalpha.com"),
        ("Bing", "bing.com"),
        ("DuckDuckGo", "duckduckgo.com"),
        ("Brave Search", "search.brave.com"),
        ("Perplexity", "perplexity.ai"),
        ("ChatGPT", "chatgpt.com"),
        ("Claude", "claude.ai"),
        ("Gemini", "gemini.google.com"),
    ),
    "Maps/Travel": (
        ("Google Maps", "maps.google.com"),
        ("Booking", "booking.com"),
        ("Airbnb", "airbnb.com"),
        ("Expedia", "expedia.com"),
        ("Kayak", "kayak.com"),
        ("Skyscanner", "skyscanner.com"),
        ("Skyscanner", "skyscanner.net"),
        ("Uber", "uber.com"),
        ("Lyft", "lyft.com"),
        ("Tripadvisor", "tripadvisor.com"),
        ("OpenStreetMap", "openstreetmap.org"),
        ("Apple Maps", "maps.apple.com"),
        ("Waze", "waze.com"),
        ("Citymapper", "citymapper.com"),
        ("Hotels.com", "hotels.com"),
        ("Trivago", "trivago.com"),
        ("Vrbo", "vrbo.com"),
        ("Agoda", "agoda.com"),
        ("Kiwi.com", "kiwi.com"),
        ("Hopper", "hopper.com"),
        ("Rome2Rio", "rome2rio.com"),
        ("Trainline", "thetrainline.com"),
        ("Amtrak", "amtrak.com"),
        ("United", "united.com"),
        ("Delta", "delta.com"),
        ("Ryanair", "ryanair.com"),
        ("easyJet", "easyjet.com"),
    ),
    "Shopping": (
        ("Amazon", "amazon.com"),
        ("eBay", "ebay.com"),
        ("AliExpress", "aliexpress.com"),
        ("Etsy", "etsy.com"),
        ("Walmart", "walmart.com"),
        ("Target", "target.com"),
        ("Best Buy", "bestbuy.com"),
        ("Costco", "costco.com"),
        ("Alibaba", "alibaba.com"),
        ("Shopify", "myshopify.com"),
        ("IKEA", "ikea.com"),
        ("Home Depot", "homedepot.com"),
        ("Newegg", "newegg.com"),
        ("Wayfair", "wayfair.com"),
        ("Zalando", "zalando.com"),
        ("ASOS", "asos.com"),
        ("Temu", "temu.com"),
        ("Shein", "shein.com"),
        ("Rakuten", "rakuten.com"),
        ("Mercado Libre", "mercadolibre.com"),
        ("Instacart", "instacart.com"),
        ("Nike", "nike.com"),
        ("Zara", "zara.com"),
        ("B&H", "bhphotovideo.com"),
    ),
    "News/Media": (
        ("Hacker News", "news.ycombinator.com"),
        ("Reddit", "reddit.com"),
        ("TechCrunch", "techcrunch.com"),
        ("The Verge", "theverge.com"),
        ("NYTimes", "nytimes.com"),
        ("Washington Post", "washingtonpost.com"),
        ("BBC", "bbc.com"),
        ("BBC", "bbc.co.uk"),
        ("CNN", "cnn.com"),
        ("YouTube", "youtube.com"),
        ("YouTube", "youtu.be"),
        ("Netflix", "netflix.com"),
        ("Hulu", "hulu.com"),
        ("Spotify", "spotify.com"),
        ("The Guardian", "theguardian.com"),
        ("Reuters", "reuters.com"),
        ("Bloomberg", "bloomberg.com"),
        ("WSJ", "wsj.com"),
        ("Financial Times", "ft.com"),
        ("The Economist", "economist.com"),
        ("NPR", "npr.org"),
        ("AP News", "apnews.com"),
        ("Ars Technica", "arstechnica.com"),
        ("Wired", "wired.com"),
        ("Engadget", "engadget.com"),
        ("Lobsters", "lobste.rs"),
        ("Substack", "substack.com"),
        ("Twitch", "twitch.tv"),
        ("Vimeo", "vimeo.com"),
        ("SoundCloud", "soundcloud.com"),
        ("Apple Music", "music.apple.com"),
        ("Disney+", "disneyplus.com"),
        ("Prime Video", "primevideo.com"),
        ("X", "x.com"),
        ("Twitter", "twitter.com"),
        ("Bluesky", "bsky.app"),
        ("Mastodon", "mastodon.social"),
        ("Instagram", "instagram.com"),
        ("Facebook", "facebook.com"),
        ("TikTok", "tiktok.com"),
    ),
}

# Patterns that a literal host cannot express.
CATEGORY_PATTERN_RULES: Tuple[CatalogEntry, ...] = (
    CatalogEntry("Cloud/Infra", "AWS", host_regex=r"aws\.amazon\.com$"),
    CatalogEntry("Cloud/Infra", "AWS", host_regex=r"amazonaws\.com$"),
    CatalogEntry("Docs/Files", "Office 365", host_regex=r"^office\.com$"),
    CatalogEntry("Research/Learning", "Google Search", host="google.com", path=r"^/(?:search|webhp)"),
    CatalogEntry("Maps/Travel", "Google Maps", host="google.com", path=r"^/maps"),
    CatalogEntry("Maps/Travel", "Google Flights", host="google.com", path=r"^/travel"),
    CatalogEntry("Shopping", "Amazon", host_regex=r"(?:^|\.)amazon\.[a-z.]+$"),
    CatalogEntry(
        "Shopping", "Amazon Search", host="amazon.com", path=r"^/s(?:/|$)", priority=SPECIFIC_RULE_PRIORITY
    ),
    CatalogEntry("Shopping", "eBay", host_regex=r"(?:^|\.)ebay\.[a-z.]+$"),
    CatalogEntry("Shopping", "Apple Store", host="apple.com", path=r"^/(?:[a-z]{2}/)?shop"),
)

# Multi-entity hosts: checked before the generic host entries and refine the label.
SPECIFIC_RULES: Tuple[CatalogEntry, ...] = (
    CatalogEntry(
        "Dev/Code",
        "GitHub – Pull Requests",
        host="github.com",
        path=r"^/[^/]+/[^/]+/pulls?(?:/|$)",
        priority=SPECIFIC_RULE_PRIORITY,
        derive=DeriveStrategy.GITHUB_REPO,
        derive_arg="Pull Requests",
    ),
    CatalogEntry(
        "Dev/Code",
        "GitHub – Issues",
        host="github.com",
        path=r"^/[^/]+/[^/]+/issues(?:/|$)",
        priority=SPECIFIC_RULE_PRIORITY,
        derive=DeriveStrategy.GITHUB_REPO,
        derive_arg="Issues",
    ),
    CatalogEntry(
        "Dev/Code",
        "GitHub – Actions",
        host="github.com",
        path=r"^/[^/]+/[^/]+/actions(?:/|$)",
        priority=SPECIFIC_RULE_PRIORITY,
        derive=DeriveStrategy.GITHUB_REPO,
        derive_arg="Actions",
    ),
    CatalogEntry(
        "Dev/Code",
        "GitLab – Merge Requests",
        host="gitlab.com",
        path=r"/-/merge_requests(?:/|$)",
        priority=SPECIFIC_RULE_PRIORITY,
    ),
    CatalogEntry(
        "Work/PM",
        "Jira – Issues",
        host_regex=r"(?:^|\.)(?:atlassian\.net|jira\.com)$",
        path=r"/(?:browse|issues)/[a-z][a-z0-9]+-\d+",
        priority=SPECIFIC_RULE_PRIORITY,
        derive=DeriveStrategy.ISSUE_KEY,
        derive_arg="Jira",
    ),
    CatalogEntry(
        "Work/PM",
        "Linear – Issues",
        host="linear.app",
        path=r"/issue/",
        priority=SPECIFIC_RULE_PRIORITY,
        derive=DeriveStrategy.ISSUE_KEY,
        derive_arg="Linear",
    ),
    CatalogEntry(
        "Comms",
        "Slack",
        host="slack.com",
        title=r"\bSlack\b",
        priority=SPECIFIC_RULE_PRIORITY,
        derive=DeriveStrategy.SLACK_CHANNEL,
    ),
    CatalogEntry(
        "News/Media",
        "Reddit",
        host="reddit.com",
        path=r"(?:^|/)r/[^/]+",
        priority=SPECIFIC_RULE_PRIORITY,
        derive=DeriveStrategy.SUBREDDIT,
    ),
    CatalogEntry(
        "Comms",
        "LinkedIn",
        host="linkedin.com",
        priority=SPECIFIC_RULE_PRIORITY,
        derive=DeriveStrategy.LINKEDIN_VIEW,
    ),
)


def catalog_entries() -> List[CatalogEntry]:
    """Every entry in declaration order: specific rules, then each category's hosts and patterns."""
    entries: List[CatalogEntry] = list(SPECIFIC_RULES)
    for category, hosts in CATEGORY_HOSTS.items():
        entries.extend(CatalogEntry(category, label, host=host) for label, host in hosts)
        entries.extend(entry for entry in CATEGORY_PATTERN_RULES if entry.category == category)
    return entries


def _entry_rule(entry: CatalogEntry, index: int) -> Optional[Rule]:
    host = None
    if entry.host:
        host = host_pattern(entry.host)
    elif entry.host_regex:
        host = compile_pattern(entry.host_regex, "i")
    path = compile_pattern(entry.path, "i") if entry.path else None
    title = compile_pattern(entry.title, "i") if entry.title else None
    if host is None and path is None and title is None:
        return None
    return Rule(
        name=entry.label,
        category=entry.category,
        label=entry.label,
        color=entry.color,
        priority=entry.priority,
        index=index,
        source="catalog",
        host=host,
        path=path,
        title=title,
        derive=entry.derive,
        derive_arg=entry.derive_arg,
    )


def compile_catalog(entries: Iterable[CatalogEntry]) -> List[Rule]:
    """Compile catalog entries ordered by priority desc, then declaration order."""
    compiled = []
    for index, entry in enumerate(entries):
        rule = _entry_rule(entry, index)
        if rule is not None:
            compiled.append(rule)
    return order_catalog(compiled)


CATALOG_RULES: Tuple[Rule, ...] = tuple(compile_catalog(catalog_entries()))
