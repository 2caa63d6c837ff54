LOCATION_CLUES = {
    # Capitals
    'TOKYO': 'This city is famous for its cherry blossoms and advanced technology.',
    'LONDON': 'This city is home to Big Ben and the River Thames.',
    'PARIS': 'You can see the Eiffel Tower from many points in this city.',
    'BERLIN': 'This city was once divided by a famous wall.',
    'ROME': 'This city is known as the Eternal City and has the Colosseum.',
    'CAIRO': 'This city sits on the Nile, close to the Pyramids of Giza.',
    'ATHENS': 'This city is watched over by the Parthenon on the Acropolis.',
    'MADRID': 'This city is home to the Prado Museum and Real Madrid.',
    'MOSCOW': 'This city is centered on the Kremlin and Red Square.',
    'OTTAWA': 'This city hosts a parliament on a hill above a river of the same name.',
    'CANBERRA': 'This purpose-built city was chosen as a compromise between two rivals.',
    'LIMA': 'This coastal city was founded by Francisco Pizarro as the City of Kings.',
    'NAIROBI': 'This city has a national park with giraffes inside its limits.',
    'BEIJING': 'This city is home to the Forbidden City.',
    # Countries
    'JAPAN': 'This island nation is known for sushi and Mount Fuji.',
    'FRANCE': 'This country is famous for its wine, cheese, and the Louvre Museum.',
    'ITALY': 'This country is shaped like a boot and known for pasta.',
    'BRAZIL': 'This is the largest country in South America, home to the Amazon.',
    'AUSTRALIA': 'This country is both a continent and home to kangaroos.',
    'SPAIN': 'This country is known for flamenco, paella and the Sagrada Familia.',
    'EGYPT': 'This country is home to the Great Pyramids and the Sphinx.',
    'INDIA': 'This country is home to the Taj Mahal and the Ganges.',
    'CHINA': 'This country built a wall visible across thousands of kilometres.',
    'CANADA': 'This country has a maple leaf on its flag.',
    'MEXICO': 'This country is the birthplace of chocolate and the Aztec empire.',
    'PERU': 'This country is home to Machu Picchu.',
    'KENYA': 'This country is famous for safaris and long-distance runners.',
    'NORWAY': 'This country is known for its fjords and the northern lights.',
    'GREECE': 'This country is the birthplace of the Olympic Games.',
}


def location_clue(word: str) -> str:
    """Return a human readable clue for a target word."""
    return LOCATION_CLUES.get(word) or f'This {len(word)} letter location is waiting to be discovered!'
