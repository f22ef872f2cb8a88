import sys
import asyncio
from sqlalchemy.future import select
from truckquote.core.security import hash_password
from truckquote.core.enums import UserRole
from truckquote.db.session import AsyncSessionLocal, engine, init_db
from truckquote.models.user import User

async def create_admin_user(email: str, password: str) -> bool:
    try:
        await init_db()

        async with AsyncSessionLocal() as db:
            res = await db.execute(select(User).where(User.email == email))
            if res.scalars().first():
                print(f"Error: User '{email}' already exists")
                return False

            admin = User(
                email=email,
                password_hash=hash_password(password),
                role=UserRole.ADMIN,
            )
            db.add(admin)
            await db.commit()
            await db.refresh(admin)

        print(f"Admin user '{email}' created successfully")
        print(f"User ID: {admin.id}")
        print(f"Role: admin")
        return True

    except Exception as e:
        print(f"Error creating admin user: {str(e)}")
        return False
    finally:
        await engine.dispose()


def main():
    if len(sys.argv) < 3:
        print("Usage: python create_admin.py <email> <password>")
        sys.exit(1)

    email = sys.argv[1].strip().lower()
    password = sys.argv[2]

    if not email or not password:
        print("Error: email and password cannot be empty")
        sys.exit(1)

    success = asyncio.run(create_admin_user(email, password))
    sys.exit(0 if success else 1)


if __name__ == "__main__":
    main()
