"""
Simple script to test the Neo4j connection and show what the job board holds.
Run this to diagnose connection issues.
"""

import sys
import traceback

from neo4j import GraphDatabase

from jobboard.config import get_settings


def test_connection():
    """Test Neo4j connection and show basic stats."""
    settings = get_settings()
    print(f"Testing connection to: {settings.neo4j_uri}")
    print(f"User: {settings.neo4j_user}")
    print(f"Password: {'*' * len(settings.neo4j_password)}")
    print()

    try:
        driver = GraphDatabase.driver(
            settings.neo4j_uri,
            auth=(settings.neo4j_user, settings.neo4j_password),
        )

        with driver.session() as session:
            session.run("RETURN 1 AS test").single()
            print("✓ Connection successful!")

            record = session.run("MATCH (j:Job) RETURN count(j) AS cnt").single()
            print(f"✓ Jobs in database: {record['cnt'] if record else 0}")

            record = session.run("MATCH (a:Account) RETURN count(a) AS cnt").single()
            print(f"✓ Accounts: {record['cnt'] if record else 0}")

            record = session.run("MATCH (s:Session) RETURN count(s) AS cnt").single()
            print(f"✓ Open sessions: {record['cnt'] if record else 0}")

            records = session.run(
                "MATCH (j:Job) RETURN j.id AS id, j.title AS title, j.company AS company "
                "ORDER BY j.created_at LIMIT 5"
            ).data()
            if records:
                print("\nSample jobs:")
                for r in records:
                    print(f"  - {r['id']}: {r.get('title', 'N/A')} @ {r.get('company', 'N/A')}")

        driver.close()
        print("\n✓ All checks passed!")

    except Exception as e:  # pylint: disable=broad-exception-caught
        print(f"\n✗ Error: {e}")
        traceback.print_exc()
        return False

    return True


if __name__ == "__main__":
    test_success = test_connection()  # pylint: disable=invalid-name
    sys.exit(0 if test_success else 1)
