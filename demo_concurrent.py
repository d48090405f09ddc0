import asyncio
from sdk.flatstore import StoreClient
import httpx

async def add_one(client, cart_id, product_id, n):
    try:
        await client.add_to_cart_async(cart_id, product_id)
    except httpx.HTTPStatusError as e:
        print(f"❌ request {n} failed with {e.response.status_code}: {e.response.text}")
    except Exception as e:
        print(f"❌ request {n} unexpected failure: {e}")

async def main(requests_count: int = 20):
    c = StoreClient(base_url="http://127.0.0.1:3000")

    product = c.create_product("Gaming Laptop", 5000, 2, category="electronics")
    cart = c.create_cart()
    print(f"\n🖥️  Product: {product}")
    print(f"🛒 Cart: {cart}")

    print(f"\n⚡ Sending {requests_count} concurrent adds to cart {cart['id']}...")
    await asyncio.gather(*(
        add_one(c, cart["id"], product["id"], n) for n in range(requests_count)
    ))

    items = c.get_cart_products(cart["id"])
    quantity = sum(i["quantity"] for i in items)
    print(f"\n📦 Final line items: {items}")
    if quantity == requests_count:
        print(f"✅ quantity {quantity}, no lost updates")
    else:
        print(f"⚠️  quantity {quantity}, expected {requests_count}")

if __name__ == "__main__":
    asyncio.run(main())
