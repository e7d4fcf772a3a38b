from __future__ import annotations

from sqlalchemy.orm import Session

from webapp.data.pokemon_seed import POKEMONS
from webapp.db.session import SessionLocal
from webapp.models.pokemon import Pokemon


def upsert_pokemons(db: Session, rows: list[dict]) -> tuple[int, int]:
    created = 0
    updated = 0

    for item in rows:
        pokemon_id = int(item["id"])
        name = str(item["name"]).strip()
        ability = str(item.get("ability") or "").strip() or None
        owner = str(item.get("owner") or "").strip() or None
        is_active = bool(item.get("is_active", True))

        row = db.get(Pokemon, pokemon_id)
        if row is None:
            db.add(Pokemon(id=pokemon_id, name=name, ability=ability, owner=owner, is_active=is_active))
            created += 1
            continue

        changed = False
        for field, value in (("name", name), ("ability", ability), ("owner", owner), ("is_active", is_active)):
            if getattr(row, field) != value:
                setattr(row, field, value)
                changed = True

        if changed:
            db.add(row)
            updated += 1

    db.commit()
    return created, updated


def main() -> None:
    db = SessionLocal()
    try:
        created, updated = upsert_pokemons(db, POKEMONS)
        total = db.query(Pokemon).count()
    finally:
        db.close()
    print(f"pokemons upsert done: created={created}, updated={updated}, total={total}")


if __name__ == "__main__":
    main()
