"""
Default identity lookup tables.

Outlet and critic alias data maintained by hand. When a new spelling shows up
in the unresolved report, add it here (or in an --aliases override file).
Variants are compared after comparison_key(), so case, punctuation, hyphens
and a leading "The" don't need separate entries.
"""

# canonical outlet id -> known variants
OUTLET_ALIASES = {
    "nytimes": ["new york times", "ny times", "nyt", "newyorktimes"],
    "vulture": [
        "new york magazine / vulture", "ny mag", "nymag", "new york magazine",
        "ny magazine", "vult", "newyorkmagazine",
    ],
    "variety": ["variety magazine"],
    "hollywood-reporter": ["hollywood reporter", "thr", "hollywoodreporter"],
    "deadline": ["deadline hollywood", "deadline.com"],
    "timeout": [
        "time out", "time out new york", "timeout new york", "time out ny",
        "timeout ny", "timeoutny",
    ],
    "guardian": ["theguardian"],
    "washpost": ["washington post", "wapo", "wash post", "washingtonpost"],
    "wsj": ["wall street journal", "wallstreetjournal"],
    "nypost": ["new york post", "ny post", "nyp", "newyorkpost"],
    "nydailynews": [
        "new york daily news", "daily news", "ny daily news", "nydn", "newyorkdailynews",
    ],
    "ew": ["entertainment weekly", "entertainmentweekly"],
    "theatermania": ["theater mania", "theatremania", "theatre mania", "tmania", "tman"],
    "broadwaynews": ["broadway news", "bwaynews"],
    "broadwayworld": ["broadway world", "bww"],
    "playbill": ["play bill"],
    "thewrap": ["wrap"],
    "indiewire": ["indie wire"],
    "observer": ["ny observer", "new york observer"],
    "newyorker": ["new yorker"],
    "ap": ["associated press", "ap news"],
    "reuters": [],
    "theatrely": ["theater ly", "thly"],
    "nysr": ["new york stage review", "ny stage review", "newyorkstagereview"],
    "nytg": [
        "new york theatre guide", "ny theatre guide", "nytheatreguide", "new york theater guide",
    ],
    "nyt-theater": ["new york theater", "newyorktheater", "ny theater", "nythtr"],
    "cititour": ["citi tour", "city tour", "citi"],
    "stageandcinema": ["stage and cinema"],
    "talkinbroadway": ["talkin broadway"],
    "frontmezzjunkies": ["front mezz junkies", "fmj", "frontmezz"],
    "dailybeast": ["daily beast", "tdb"],
    "usatoday": ["usa today"],
    "forward": ["jewish forward"],
    "rollingstone": ["rolling stone"],
    "chicagotribune": ["chicago tribune", "chi tribune", "chtrib"],
    "latimes": ["los angeles times", "la times"],
    "sfchronicle": ["san francisco chronicle", "sf chronicle"],
    "thestage": ["stage"],
    "whatsonstage": ["whats on stage", "whatson"],
    "telegraph": ["daily telegraph"],
    "financialtimes": ["financial times", "ft"],
    "billboard": ["bill board"],
    "amny": ["amnewyork", "am new york", "amnewsyork"],
    "culturesauce": ["culture sauce", "csce"],
    "oneminutecritic": ["one minute critic", "1 minute critic", "omc"],
    "artsfuse": ["arts fuse"],
    "slantmagazine": ["slant magazine", "slant"],
    "huffpost": ["huffington post", "huff post"],
    "nbcnews": ["nbc news", "nbc"],
    "cbsnews": ["cbs news", "cbs"],
    "newsweek": ["news week"],
    "time": ["time magazine"],
}

OUTLET_DISPLAY_NAMES = {
    "nytimes": "The New York Times",
    "vulture": "Vulture",
    "variety": "Variety",
    "hollywood-reporter": "The Hollywood Reporter",
    "deadline": "Deadline",
    "timeout": "Time Out New York",
    "guardian": "The Guardian",
    "washpost": "The Washington Post",
    "wsj": "The Wall Street Journal",
    "nypost": "New York Post",
    "nydailynews": "New York Daily News",
    "ew": "Entertainment Weekly",
    "theatermania": "TheaterMania",
    "broadwaynews": "Broadway News",
    "broadwayworld": "BroadwayWorld",
    "playbill": "Playbill",
    "thewrap": "The Wrap",
    "indiewire": "IndieWire",
    "observer": "Observer",
    "newyorker": "The New Yorker",
    "ap": "Associated Press",
    "reuters": "Reuters",
    "theatrely": "Theatrely",
    "nysr": "New York Stage Review",
    "nytg": "New York Theatre Guide",
    "nyt-theater": "New York Theater",
    "cititour": "Cititour",
    "stageandcinema": "Stage and Cinema",
    "talkinbroadway": "Talkin' Broadway",
    "frontmezzjunkies": "Front Mezz Junkies",
    "dailybeast": "The Daily Beast",
    "usatoday": "USA Today",
    "forward": "The Forward",
    "rollingstone": "Rolling Stone",
    "chicagotribune": "Chicago Tribune",
    "latimes": "Los Angeles Times",
    "sfchronicle": "San Francisco Chronicle",
    "thestage": "The Stage",
    "whatsonstage": "WhatsOnStage",
    "telegraph": "The Telegraph",
    "financialtimes": "Financial Times",
    "amny": "amNewYork",
    "culturesauce": "Culture Sauce",
    "oneminutecritic": "One Minute Critic",
    "artsfuse": "The Arts Fuse",
    "slantmagazine": "Slant Magazine",
}

# review URL host -> canonical outlet id (subdomains match too)
OUTLET_DOMAINS = {
    "nytimes.com": "nytimes",
    "vulture.com": "vulture",
    "nymag.com": "vulture",
    "variety.com": "variety",
    "hollywoodreporter.com": "hollywood-reporter",
    "deadline.com": "deadline",
    "timeout.com": "timeout",
    "theguardian.com": "guardian",
    "washingtonpost.com": "washpost",
    "wsj.com": "wsj",
    "nypost.com": "nypost",
    "nydailynews.com": "nydailynews",
    "ew.com": "ew",
    "theatermania.com": "theatermania",
    "broadwaynews.com": "broadwaynews",
    "broadwayworld.com": "broadwayworld",
    "playbill.com": "playbill",
    "thewrap.com": "thewrap",
    "indiewire.com": "indiewire",
    "observer.com": "observer",
    "newyorker.com": "newyorker",
    "apnews.com": "ap",
    "theatrely.com": "theatrely",
    "nystagereview.com": "nysr",
    "newyorktheatreguide.com": "nytg",
    "newyorktheater.me": "nyt-theater",
    "cititour.com": "cititour",
    "stageandcinema.com": "stageandcinema",
    "talkinbroadway.com": "talkinbroadway",
    "frontmezzjunkies.com": "frontmezzjunkies",
    "thedailybeast.com": "dailybeast",
    "usatoday.com": "usatoday",
    "forward.com": "forward",
    "rollingstone.com": "rollingstone",
    "chicagotribune.com": "chicagotribune",
    "latimes.com": "latimes",
    "sfchronicle.com": "sfchronicle",
    "thestage.co.uk": "thestage",
    "whatsonstage.com": "whatsonstage",
    "telegraph.co.uk": "telegraph",
    "ft.com": "financialtimes",
    "amny.com": "amny",
    "culturesauce.com": "culturesauce",
    "oneminutecritic.com": "oneminutecritic",
    "artsfuse.org": "artsfuse",
    "slantmagazine.com": "slantmagazine",
}

# canonical critic id -> (display name, known variants)
# Full names, initials and known typos only. First names alone are not
# aliases: "David" could be Rooney, Finkle or Cote.
CRITIC_ALIASES = {
    "jesse-green": ("Jesse Green", ["j green"]),
    "ben-brantley": ("Ben Brantley", ["b brantley"]),
    "charles-isherwood": ("Charles Isherwood", ["c isherwood"]),
    "johnny-oleksinski": (
        "Johnny Oleksinski", ["johnny oleksinki", "j oleksinski", "john oleksinski"],
    ),
    "sara-holdren": ("Sara Holdren", ["s holdren"]),
    "helen-shaw": ("Helen Shaw", ["h shaw"]),
    "adam-feldman": ("Adam Feldman", ["a feldman"]),
    "david-rooney": ("David Rooney", ["d rooney"]),
    "frank-scheck": ("Frank Scheck", ["f scheck"]),
    "greg-evans": ("Greg Evans", ["g evans"]),
    "dalton-ross": ("Dalton Ross", ["d ross"]),
    "aramide-tinubu": ("Aramide Tinubu", ["aramide timubu", "a tinubu"]),
    "juan-a-ramirez": ("Juan A. Ramirez", ["juan ramirez"]),
    "zachary-stewart": ("Zachary Stewart", ["zach stewart", "z stewart"]),
    "brittani-samuel": ("Brittani Samuel", ["b samuel"]),
    "chris-jones": ("Chris Jones", ["c jones"]),
    "gillian-russo": ("Gillian Russo", ["g russo"]),
    "jd-knapp": ("J.D. Knapp", ["j d knapp"]),
    "vinson-cunningham": ("Vinson Cunningham", ["v cunningham"]),
    "naveen-kumar": ("Naveen Kumar", ["n kumar"]),
    "jonathan-mandell": ("Jonathan Mandell", ["jon mandell", "j mandell"]),
    "brian-scott-lipton": ("Brian Scott Lipton", ["brian lipton", "b lipton"]),
    "melissa-rose-bernardo": ("Melissa Rose Bernardo", ["melissa bernardo", "m bernardo"]),
    "david-finkle": ("David Finkle", ["d finkle"]),
    "david-cote": ("David Cote", ["d cote"]),
    "tim-teeman": ("Tim Teeman", ["t teeman"]),
    "kristen-baldwin": ("Kristen Baldwin", ["k baldwin"]),
    "adrian-horton": ("Adrian Horton", ["a horton"]),
    "lane-williamson": ("Lane Williamson", ["l williamson"]),
    "linda-winer": ("Linda Winer", ["l winer"]),
    "michael-kuchwara": ("Michael Kuchwara", ["m kuchwara"]),
    "rex-reed": ("Rex Reed", ["r reed"]),
    "elysa-gardner": ("Elysa Gardner", ["e gardner"]),
    "peter-marks": ("Peter Marks", ["p marks"]),
    "matt-windman": ("Matt Windman", ["matthew windman", "m windman"]),
    "robert-hofler": ("Robert Hofler", ["bob hofler", "r hofler"]),
    "steven-suskin": ("Steven Suskin", ["steve suskin", "s suskin"]),
}


# Design Rationale and Trade-offs:
#
# 1. Why plain dict literals instead of a JSON data file?
#    - Reviewed in the same diff as the code that uses them
#    - Trade-off: Non-developers edit the override JSON instead
#
# 2. Why map domains to outlets separately from names?
#    - Scrapes often have a URL but a blank or garbled outlet field
#    - Trade-off: Syndicated articles resolve to the host, not the original outlet
