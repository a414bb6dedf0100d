"""Feed data model, lenient XML parsing and Media RSS helpers."""