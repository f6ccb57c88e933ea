from rtreap import RandomizedTreap


keys = [5, 3, 8, 1, 4]
values = ["five", "three", "eight", "one", "four"]

# Fixed seed so the shape is reproducible
print("Creating treap...")
treap = RandomizedTreap(seed=42)
treap.build_tree(keys, values)

print(f"Treap size: {len(treap)}")
print(f"Contains 3: {3 in treap}")
print(f"Contains 9: {9 in treap}")
print(f"Height: {treap.height()}")
print(f"Is valid: {treap._validate()}")
