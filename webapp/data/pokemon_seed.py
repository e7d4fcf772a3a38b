POKEMONS = [
    {"id": 1, "name": "Pikachu", "ability": "Impactrueno", "owner": "Ash Ketchum", "is_active": True},
    {"id": 2, "name": "Charmander", "ability": "Mar Llamas", "owner": "Misty", "is_active": True},
    {"id": 3, "name": "Bulbasaur", "ability": "Espesura", "owner": "Brock", "is_active": False},
    {"id": 4, "name": "Squirtle", "ability": "Torrente", "owner": "Ash Ketchum", "is_active": True},
    {"id": 5, "name": "Butterfree", "ability": "Ojo Compuesto", "owner": "Misty", "is_active": False},
]
