from combinargs import parsers

parsers.TESTING = True
