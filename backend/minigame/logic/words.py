"""Word corpus for the typing game. Lowercase, unique, no punctuation."""

WORDS: tuple[str, ...] = (
    "about", "above", "across", "after", "again", "against", "almost", "alone", "along", "already",
    "always", "among", "animal", "answer", "around", "become", "before", "began", "behind", "being",
    "below", "better", "between", "black", "board", "body", "book", "both", "bring", "build",
    "built", "call", "came", "carry", "cause", "center", "change", "check", "children", "city",
    "class", "clear", "close", "cold", "color", "come", "common", "complete", "could", "country",
    "course", "cover", "cross", "dark", "deep", "differ", "direct", "does", "done", "door",
    "down", "draw", "during", "early", "earth", "east", "easy", "enough", "even", "every",
    "example", "face", "fact", "family", "farm", "fast", "field", "figure", "final", "find",
    "fire", "first", "follow", "food", "force", "form", "found", "free", "friend", "front",
    "full", "game", "gave", "give", "government", "great", "green", "ground", "group", "grow",
    "half", "hand", "happen", "hard", "head", "hear", "heard", "help", "high", "hold",
    "home", "horse", "hour", "house", "idea", "important", "inch", "island", "keep", "kind",
    "king", "knew", "know", "land", "language", "large", "last", "late", "learn", "leave",
    "left", "letter", "life", "light", "line", "list", "listen", "little", "live", "long",
    "look", "machine", "made", "make", "many", "mark", "measure", "might", "mile", "mind",
    "minute", "money", "moon", "more", "morning", "most", "mountain", "move", "much", "music",
    "name", "near", "need", "never", "next", "night", "north", "note", "nothing", "notice",
    "number", "object", "ocean", "often", "once", "only", "open", "order", "other", "over",
    "page", "paper", "part", "pass", "people", "perhaps", "picture", "piece", "place", "plan",
    "plant", "play", "point", "power", "press", "problem", "produce", "product", "pull", "question",
    "quick", "rain", "reach", "read", "ready", "real", "record", "remember", "rest", "right",
    "river", "road", "rock", "room", "round", "rule", "said", "same", "school", "science",
    "second", "seem", "sentence", "serve", "several", "shape", "ship", "short", "should", "show",
    "side", "simple", "since", "size", "slow", "small", "snow", "song", "soon", "sound",
    "south", "space", "special", "stand", "star", "start", "state", "step", "still", "stood",
    "story", "street", "strong", "study", "such", "sure", "surface", "table", "tail", "take",
    "talk", "test", "than", "that", "their", "them", "then", "there", "these", "thing",
    "think", "those", "though", "thought", "three", "through", "time", "together", "told", "took",
    "toward", "town", "travel", "tree", "true", "turn", "under", "unit", "until", "upon",
    "usual", "very", "voice", "vowel", "wait", "walk", "want", "warm", "watch", "water",
    "week", "weight", "well", "went", "were", "west", "what", "wheel", "where", "which",
    "while", "white", "whole", "wind", "with", "wonder", "wood", "word", "work", "world",
    "would", "write", "year", "young",
)  # fmt: skip
