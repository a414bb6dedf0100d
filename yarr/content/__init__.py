"""HTML utilities: tree helpers, sanitizing, readability and video embeds."""