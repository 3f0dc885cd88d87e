"""
Canonical attack catalogue (DDA 1.4 format).

Attacks from Digimon Adventure, Adventure 02 and Tamers. Tags on a template
are only usable by a Digimon that owns the granting quality.
"""

from src.attacks.attack_data import AttackTemplate, attack

FRESH_ATTACKS = [
    attack("bubble-blow", "Bubble Blow", "ranged", "fresh",
           "Produces bubbles from its mouth to intimidate opponents.",
           digimon="Botamon, Punimon, Poyomon, etc."),
]

IN_TRAINING_ATTACKS = [
    attack("bubble-blow-in-training", "Bubble Blow", "ranged", "in-training",
           "Fires bubbles from its mouth.", digimon="Koromon, Tsunomon, Tokomon, etc."),
]

ROOKIE_ATTACKS = [
    attack("pepper-breath", "Pepper Breath", "ranged", "rookie",
           "Spits a ball of flame from its mouth.", digimon="Agumon"),
    attack("claw-attack", "Claw Attack", "melee", "rookie",
           "Attacks with its claws.", digimon="Agumon"),
    attack("blue-blaster", "Blue Blaster", "ranged", "rookie",
           "Fires a stream of blue flames from its mouth.", digimon="Gabumon"),
    attack("horn-attack", "Horn Attack", "melee", "rookie",
           "Attacks with its horn.", digimon="Gabumon"),
    attack("spiral-twister", "Spiral Twister", "ranged", "rookie",
           "Creates a spiraling flame that hits the opponent.", digimon="Biyomon"),
    attack("super-shocker", "Super Shocker", "ranged", "rookie",
           "Fires an electric bolt from its antennae.", digimon="Tentomon"),
    attack("poison-ivy", "Poison Ivy", "melee", "rookie",
           "Entangles the enemy with poisonous vines.", effect="Poison", digimon="Palmon"),
    attack("marching-fishes", "Marching Fishes", "ranged", "rookie",
           "Summons a school of fish to attack.",
           tags=("Area Attack: Burst",), digimon="Gomamon"),
    attack("boom-bubble", "Boom Bubble", "ranged", "rookie",
           "Shoots a ball of compressed air.", digimon="Patamon"),
    attack("lightning-paw", "Lightning Paw", "melee", "rookie",
           "A lightning-fast punch.",
           tags=("Certain Strike I",), digimon="Gatomon"),
    attack("cats-eye-hypnotism", "Cat's Eye Hypnotism", "ranged", "rookie",
           "Hypnotizes the enemy with its eyes.", effect="Confuse", digimon="Gatomon", attack_type="support"),
    attack("vee-headbutt", "Vee Headbutt", "melee", "rookie",
           "A powerful headbutt attack.",
           tags=("Charge Attack",), digimon="Veemon"),
    attack("sticky-net", "Sticky Net", "ranged", "rookie",
           "Shoots a net of sticky threads.", effect="Immobilize", digimon="Wormmon"),
    attack("pyro-sphere", "Pyro Sphere", "ranged", "rookie",
           "Spits a concentrated ball of fire.", digimon="Guilmon"),
    attack("rock-breaker", "Rock Breaker", "melee", "rookie",
           "A powerful claw strike that can break rocks.",
           tags=("Armor Piercing I",), digimon="Guilmon"),
    attack("bunny-blast", "Bunny Blast", "ranged", "rookie",
           "Fires a ball of green energy.", digimon="Terriermon"),
    attack("terrier-tornado", "Terrier Tornado", "melee", "rookie",
           "Spins like a tornado, striking all nearby.",
           tags=("Area Attack: Burst",), digimon="Terriermon"),
    attack("diamond-storm", "Diamond Storm", "ranged", "rookie",
           "Summons a storm of razor-sharp shards.",
           tags=("Area Attack: Cone",), digimon="Renamon"),
]

CHAMPION_ATTACKS = [
    attack("nova-blast", "Nova Blast", "ranged", "champion",
           "Fires a massive ball of fire from its mouth.",
           tags=("Weapon II",), digimon="Greymon"),
    attack("great-horns-attack", "Great Horns Attack", "melee", "champion",
           "Charges and rams with its horns.",
           tags=("Charge Attack",), digimon="Greymon"),
    attack("howling-blaster", "Howling Blaster", "ranged", "champion",
           "Fires a powerful stream of blue flames.",
           tags=("Weapon II",), digimon="Garurumon"),
    attack("meteor-wing", "Meteor Wing", "ranged", "champion",
           "Rains down fireballs from its wings.",
           tags=("Area Attack: Blast",), digimon="Birdramon"),
    attack("electro-shocker", "Electro Shocker", "ranged", "champion",
           "Fires a ball of electrical energy.",
           tags=("Weapon II",), effect="Stun", digimon="Kabuterimon"),
    attack("needle-spray", "Needle Spray", "ranged", "champion",
           "Shoots countless needles from its body.",
           tags=("Area Attack: Cone",), digimon="Togemon"),
    attack("lightspeed-jabbing", "Lightspeed Jabbing", "melee", "champion",
           "Rapid-fire punches.",
           tags=("Weapon II", "Certain Strike I"), digimon="Togemon"),
    attack("harpoon-torpedo", "Harpoon Torpedo", "ranged", "champion",
           "Fires its horn like a torpedo.",
           tags=("Weapon II",), digimon="Ikkakumon"),
    attack("hand-of-fate", "Hand of Fate", "ranged", "champion",
           "Fires a beam of holy energy from its fist.",
           tags=("Weapon III", "Armor Piercing I"), digimon="Angemon"),
    attack("angel-rod", "Angel Rod", "melee", "champion",
           "Strikes with its holy staff.",
           tags=("Weapon II",), digimon="Angemon"),
    attack("vee-laser", "Vee Laser", "ranged", "champion",
           "Fires an X-shaped laser from its chest.",
           tags=("Weapon II",), digimon="ExVeemon"),
    attack("spiking-strike", "Spiking Strike", "melee", "champion",
           "Stabs with its spikes.",
           tags=("Weapon II", "Armor Piercing I"), digimon="Stingmon"),
    attack("pyro-blaster", "Pyro Blaster", "ranged", "champion",
           "Fires a powerful stream of flames.",
           tags=("Weapon III",), digimon="Growlmon"),
    attack("dragon-slash", "Dragon Slash", "melee", "champion",
           "Slashes with its arm blades.",
           tags=("Weapon II", "Armor Piercing I"), digimon="Growlmon"),
    attack("gargo-laser", "Gargo Laser", "ranged", "champion",
           "Fires a barrage of bullets from its gatling arms.",
           tags=("Weapon II", "Ammo"), digimon="Gargomon"),
    attack("fox-tail-inferno", "Fox Tail Inferno", "ranged", "champion",
           "Launches fireballs from its tails.",
           tags=("Weapon II", "Area Attack: Cone"), digimon="Kyubimon"),
    attack("dragon-wheel", "Dragon Wheel", "melee", "champion",
           "Engulfs itself in blue flames and charges.",
           tags=("Weapon III", "Charge Attack"), digimon="Kyubimon"),
]

ULTIMATE_ATTACKS = [
    attack("giga-blaster", "Giga Blaster", "ranged", "ultimate",
           "Fires organic missiles from its chest.",
           tags=("Weapon IV", "Area Attack: Blast"), digimon="MetalGreymon"),
    attack("mega-claw", "Mega Claw", "melee", "ultimate",
           "Extends its metal claw to slash.",
           tags=("Weapon III", "Armor Piercing II"), digimon="MetalGreymon"),
    attack("wolf-claw", "Wolf Claw", "melee", "ultimate",
           "Slashes with razor-sharp claws.",
           tags=("Weapon IV", "Certain Strike II"), digimon="WereGarurumon"),
    attack("garuru-kick", "Garuru Kick", "melee", "ultimate",
           "A powerful flying kick.",
           tags=("Weapon III", "Charge Attack"), digimon="WereGarurumon"),
    attack("wing-blade", "Wing Blade", "ranged", "ultimate",
           "Fires a blade of flame from its wings.",
           tags=("Weapon IV", "Area Attack: Line"), digimon="Garudamon"),
    attack("horn-buster", "Horn Buster", "ranged", "ultimate",
           "Fires electrical energy from its horn.",
           tags=("Weapon IV",), effect="Stun", digimon="MegaKabuterimon"),
    attack("flower-cannon", "Flower Cannon", "ranged", "ultimate",
           "Fires energy from its flower hands.",
           tags=("Weapon IV", "Armor Piercing I"), digimon="Lillymon"),
    attack("vulcans-hammer", "Vulcan's Hammer", "melee", "ultimate",
           "Strikes with its powerful hammer.",
           tags=("Weapon V", "Armor Piercing II"), digimon="Zudomon"),
    attack("gate-of-destiny", "Gate of Destiny", "ranged", "ultimate",
           "Opens a portal that sucks in and destroys enemies.",
           tags=("Weapon V", "Signature Move"), digimon="MagnaAngemon"),
    attack("excalibur", "Excalibur", "melee", "ultimate",
           "Extends a blade of holy energy from its arm.",
           tags=("Weapon IV", "Armor Piercing II"), digimon="MagnaAngemon"),
    attack("celestial-arrow", "Celestial Arrow", "ranged", "ultimate",
           "Fires an arrow of holy light.",
           tags=("Weapon IV", "Certain Strike II"), digimon="Angewomon"),
    attack("heavens-charm", "Heaven's Charm", "ranged", "ultimate",
           "Creates a cross of holy energy that purifies.",
           effect="Cleanse", digimon="Angewomon", attack_type="support"),
    attack("desperado-blaster", "Desperado Blaster", "ranged", "ultimate",
           "Rapid-fires energy bullets from hip guns.",
           tags=("Weapon IV", "Ammo"), digimon="Paildramon"),
    attack("atomic-blaster", "Atomic Blaster", "ranged", "ultimate",
           "Fires beams from the cannons on its chest.",
           tags=("Weapon V", "Area Attack: Line"), digimon="WarGrowlmon"),
    attack("radiation-blade", "Radiation Blade", "melee", "ultimate",
           "Extends energy blades from its arms.",
           tags=("Weapon IV", "Armor Piercing II"), digimon="WarGrowlmon"),
    attack("rapid-fire", "Rapid Fire", "ranged", "ultimate",
           "Fires homing missiles from its arms.",
           tags=("Weapon IV", "Ammo"), digimon="Rapidmon"),
    attack("tri-beam", "Tri-Beam", "ranged", "ultimate",
           "Fires a triangular beam of energy.",
           tags=("Weapon V", "Area Attack: Cone"), digimon="Rapidmon"),
    attack("talisman-of-light", "Talisman of Light", "ranged", "ultimate",
           "Throws a massive calligraphy brush.",
           tags=("Weapon IV", "Armor Piercing II"), digimon="Taomon"),
]

MEGA_ATTACKS = [
    attack("terra-force", "Terra Force", "ranged", "mega",
           "Gathers energy to form a massive sphere and hurls it.",
           tags=("Weapon VII", "Signature Move", "Area Attack: Blast"), digimon="WarGreymon"),
    attack("great-tornado", "Great Tornado", "melee", "mega",
           "Spins rapidly and charges through enemies.",
           tags=("Weapon VI", "Charge Attack", "Area Attack: Pass"), digimon="WarGreymon"),
    attack("dramon-killer", "Dramon Killer", "melee", "mega",
           "Slashes with its Dramon Destroyer gauntlets.",
           tags=("Weapon VI", "Armor Piercing III"), digimon="WarGreymon"),
    attack("metal-wolf-claw", "Metal Wolf Claw", "ranged", "mega",
           "Fires a freezing blast from its mouth.",
           tags=("Weapon VII", "Area Attack: Cone"), digimon="MetalGarurumon"),
    attack("ice-wolf-bite", "Ice Wolf Bite", "ranged", "mega",
           "Fires missiles from all over its body.",
           tags=("Weapon VI", "Ammo"), digimon="MetalGarurumon"),
    attack("garuru-tomahawk", "Garuru Tomahawk", "melee", "mega",
           "Slashes with its claws.",
           tags=("Weapon VI", "Certain Strike II"), digimon="MetalGarurumon"),
    attack("crimson-flame", "Crimson Flame", "ranged", "mega",
           "Breathes holy flames.",
           tags=("Weapon VI", "Area Attack: Cone"), digimon="Phoenixmon"),
    attack("starlight-explosion", "Starlight Explosion", "ranged", "mega",
           "Releases golden light that purifies all evil.",
           tags=("Weapon VII", "Signature Move", "Area Attack: Burst"), digimon="Phoenixmon"),
    attack("giga-blaster-hk", "Giga Blaster", "ranged", "mega",
           "Fires a massive ball of electricity.",
           tags=("Weapon VI", "Area Attack: Blast"), effect="Stun", digimon="HerculesKabuterimon"),
    attack("strike-of-the-seven-stars", "Strike of the Seven Stars", "ranged", "mega",
           "Creates seven orbs of holy energy that strike.",
           tags=("Weapon VIII", "Signature Move", "Armor Piercing III"), digimon="Seraphimon"),
    attack("seven-heavens", "Seven Heavens", "ranged", "mega",
           "Fires seven balls of holy light.",
           tags=("Weapon VII", "Area Attack: Blast"), digimon="Seraphimon"),
    attack("positron-laser", "Positron Laser", "ranged", "mega",
           "Fires a devastating beam from its cannon.",
           tags=("Weapon VIII", "Area Attack: Line"), digimon="Imperialdramon"),
    attack("mega-crusher", "Mega Crusher", "melee", "mega",
           "Crushes enemies with its massive claws.",
           tags=("Weapon VII", "Armor Piercing III"), digimon="Imperialdramon"),
    attack("supreme-cannon", "Supreme Cannon", "ranged", "mega",
           "Fires a freezing blast from the MetalGarurumon head.",
           tags=("Weapon IX", "Signature Move", "Area Attack: Line"), digimon="Omnimon"),
    attack("transcendent-sword", "Transcendent Sword", "melee", "mega",
           "Slashes with the Grey Sword extending from its arm.",
           tags=("Weapon IX", "Armor Piercing IV"), digimon="Omnimon"),
    attack("lightning-joust", "Lightning Joust", "melee", "mega",
           "Thrusts with its Gram lance at high speed.",
           tags=("Weapon VII", "Charge Attack", "Armor Piercing III"), digimon="Gallantmon"),
    attack("shield-of-the-just", "Shield of the Just", "ranged", "mega",
           "Fires a beam from its Aegis shield.",
           tags=("Weapon VIII", "Signature Move", "Area Attack: Cone"), digimon="Gallantmon"),
    attack("mega-barrage", "Mega Barrage", "ranged", "mega",
           "Fires all weapons simultaneously.",
           tags=("Weapon VII", "Ammo", "Area Attack: Blast"), digimon="MegaGargomon"),
    attack("gargo-missiles", "Gargo Missiles", "ranged", "mega",
           "Launches missiles from its shoulders.",
           tags=("Weapon VI", "Area Attack: Blast"), digimon="MegaGargomon"),
    attack("spirit-strike", "Spirit Strike", "ranged", "mega",
           "Attacks with four fox spirits.",
           tags=("Weapon VI", "Certain Strike II"), digimon="Sakuyamon"),
    attack("amethyst-mandala", "Amethyst Mandala", "ranged", "mega",
           "Creates a barrier of golden rings that explode outward.",
           tags=("Weapon VII", "Area Attack: Burst"), digimon="Sakuyamon"),
    attack("double-impact", "Double Impact", "ranged", "mega",
           "Rapid-fires with its shotguns.",
           tags=("Weapon VI", "Ammo", "Certain Strike II"), digimon="Beelzemon"),
    attack("darkness-claw", "Darkness Claw", "melee", "mega",
           "Slashes with claws infused with dark power.",
           tags=("Weapon VI", "Armor Piercing II"), digimon="Beelzemon"),
]

GENERIC_ATTACKS = [
    attack("basic-attack", "Basic Attack", "melee", "any",
           "A standard physical attack."),
    attack("basic-ranged", "Basic Ranged Attack", "ranged", "any",
           "A basic ranged attack."),
]


ATTACK_CATALOG: list[AttackTemplate] = (
    FRESH_ATTACKS
    + IN_TRAINING_ATTACKS
    + ROOKIE_ATTACKS
    + CHAMPION_ATTACKS
    + ULTIMATE_ATTACKS
    + MEGA_ATTACKS
    + GENERIC_ATTACKS
)
